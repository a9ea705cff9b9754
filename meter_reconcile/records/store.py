from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from meter_reconcile.matching.normalize import normalize_identifier

NAME_COLUMNS = ["Name", "name", "Account Name", "Customer"]
IDENTIFIER_COLUMNS = ["Meter No.", "Meter No", "MeterNo", "Meter"]
CONSUMPTION_COLUMNS = ["Consumption", "Consumption Qty", "Qty", "Prev Consumption", "Prev"]


@dataclass(frozen=True)
class PriorRecord:
    name: str
    raw_identifier: str
    canonical_identifier: str
    prior_consumption: str


def cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def pick_column(row: Mapping, aliases) -> str:
    # first alias holding a non-blank value wins
    for alias in aliases:
        if alias in row:
            text = cell_text(row[alias])
            if text:
                return text
    return ""


def record_from_row(row: Mapping) -> PriorRecord:
    identifier = pick_column(row, IDENTIFIER_COLUMNS)
    return PriorRecord(
        name=pick_column(row, NAME_COLUMNS),
        raw_identifier=identifier,
        canonical_identifier=normalize_identifier(identifier),
        prior_consumption=pick_column(row, CONSUMPTION_COLUMNS),
    )


class RecordStore:
    """Prior-period records in load order, replaced wholesale on each load."""

    def __init__(self, rows: Iterable[Mapping] | None = None):
        self._records: tuple[PriorRecord, ...] = ()
        if rows is not None:
            self.load(rows)

    def load(self, rows: Iterable[Mapping]) -> int:
        # rows convert before the swap; a failing source leaves the store intact
        records = tuple(record_from_row(row) for row in rows)
        self._records = records
        return len(records)

    def find_by_identifier(self, canonical_id: str) -> PriorRecord | None:
        if not canonical_id:
            return None
        return next(
            (r for r in self._records if r.canonical_identifier == canonical_id),
            None,
        )

    @property
    def records(self) -> tuple[PriorRecord, ...]:
        return self._records

    def __iter__(self) -> Iterator[PriorRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
