from __future__ import annotations

import logging
from dataclasses import dataclass

from meter_reconcile.extract.meter_fields import NOT_FOUND
from meter_reconcile.ledger.capture import CaptureLedger
from meter_reconcile.matching.matcher import Matcher
from meter_reconcile.records.store import RecordStore

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Name", "Meter No.", "Prev Consumption", "Current Consumption"]


@dataclass(frozen=True)
class ExportRow:
    name: str
    meter_identifier: str
    prior_consumption: str
    current_consumption: str

    def as_dict(self) -> dict:
        return dict(zip(EXPORT_COLUMNS, self.as_list()))

    def as_list(self) -> list:
        return [
            self.name,
            self.meter_identifier,
            self.prior_consumption,
            self.current_consumption,
        ]


def export_rows(
    ledger: CaptureLedger,
    store: RecordStore,
    matcher: Matcher | None = None,
) -> list[ExportRow]:
    """
    Captures in capture order, then every prior record no capture matched.

    Unmatched prior rows keep store order and carry a blank current
    reading. Prior records with a blank identifier are never emitted in
    the second pass.
    """
    matcher = matcher or Matcher(store)
    rows = []
    consumed = set()

    for entry in ledger:
        record = matcher.match(entry.identifier_field).record
        if record is not None:
            rows.append(ExportRow(
                record.name,
                record.raw_identifier,
                record.prior_consumption,
                entry.consumption_field or "",
            ))
            if record.canonical_identifier:
                consumed.add(record.canonical_identifier)
        else:
            rows.append(ExportRow(NOT_FOUND, NOT_FOUND, NOT_FOUND, entry.consumption_field or ""))

    captured = len(rows)
    for record in store:
        if not record.canonical_identifier or record.canonical_identifier in consumed:
            continue
        rows.append(ExportRow(record.name, record.raw_identifier, record.prior_consumption, ""))

    logger.info(
        "Export built: %d capture rows, %d unmatched prior rows",
        captured,
        len(rows) - captured,
    )
    return rows


def rows_as_dicts(rows) -> list[dict]:
    return [row.as_dict() for row in rows]
