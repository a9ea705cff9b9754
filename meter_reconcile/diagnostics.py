from __future__ import annotations

from datetime import datetime

SNIPPET_LIMIT = 800


def _timestamp(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")


def format_capture_block(source, identifier, consumption, raw_text, now=None) -> str:
    snippet = (raw_text or "")[:SNIPPET_LIMIT]
    return (
        f"--- {_timestamp(now)} ---\n"
        f"FILE: {source}\n"
        f"DETECTED METER: {identifier}\n"
        f"DETECTED QTY: {consumption}\n"
        f"OCR TEXT SNIPPET:\n{snippet}\n"
    )


def format_edit_note(sequence_id, identifier, match) -> str:
    matched = match.record.raw_identifier if match.matched else "No match"
    note = f"Manual edit identifier: row {sequence_id} -> {identifier} matched {matched}"
    if match.ambiguous:
        note += f" (ambiguous: {len(match.candidates)} candidates)"
    return note


def format_error_note(source, exc) -> str:
    return f"OCR error: {source}: {exc}"


class DiagnosticLog:
    """Text blocks shown on the debug surface, oldest first."""

    def __init__(self):
        self._blocks: list[str] = []

    def append(self, text: str) -> None:
        self._blocks.append(text)

    def clear(self) -> None:
        self._blocks = []

    @property
    def blocks(self) -> tuple[str, ...]:
        return tuple(self._blocks)

    def render(self) -> str:
        return "\n\n".join(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)
