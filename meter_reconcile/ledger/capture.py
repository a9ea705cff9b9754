from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

IDENTIFIER_FIELD = "identifier"
CONSUMPTION_FIELD = "consumption"

_EDITABLE_FIELDS = {
    IDENTIFIER_FIELD: "identifier_field",
    CONSUMPTION_FIELD: "consumption_field",
}


@dataclass
class CaptureEntry:
    sequence_id: int
    preview_handle: Any
    raw_text: str
    identifier_field: str
    consumption_field: str


class CaptureLedger:
    """
    OCR captures in the order they were taken.

    Entries only hold the editable raw fields; match and deviation are
    always derived by the reader, never stored here.
    """

    def __init__(self):
        self._entries: list[CaptureEntry] = []
        self._next_id = 1

    def append(self, preview_handle, raw_text, identifier, consumption) -> CaptureEntry:
        entry = CaptureEntry(
            sequence_id=self._next_id,
            preview_handle=preview_handle,
            raw_text=raw_text or "",
            identifier_field=identifier or "",
            consumption_field=consumption or "",
        )
        self._next_id += 1
        self._entries.append(entry)
        return entry

    def get(self, sequence_id: int) -> CaptureEntry:
        for entry in self._entries:
            if entry.sequence_id == sequence_id:
                return entry
        raise KeyError(f"No capture with sequence id {sequence_id}")

    def edit_field(self, sequence_id: int, field: str, value) -> CaptureEntry:
        attr = _EDITABLE_FIELDS.get(field)
        if attr is None:
            raise ValueError(
                f"Unknown capture field {field!r}; expected one of {sorted(_EDITABLE_FIELDS)}"
            )
        entry = self.get(sequence_id)
        setattr(entry, attr, str(value or "").strip())
        return entry

    def reset(self) -> None:
        self._entries = []
        self._next_id = 1

    @property
    def entries(self) -> tuple[CaptureEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[CaptureEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
