from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Union

from meter_reconcile.diagnostics import (
    DiagnosticLog,
    format_capture_block,
    format_edit_note,
    format_error_note,
)
from meter_reconcile.export.exporter import ExportRow, export_rows, rows_as_dicts
from meter_reconcile.export.writer import write_workbook
from meter_reconcile.extract.meter_fields import NOT_FOUND, extract_meter_fields
from meter_reconcile.ledger.capture import IDENTIFIER_FIELD, CaptureEntry, CaptureLedger
from meter_reconcile.matching.matcher import Matcher, MatchResult, TieBreak
from meter_reconcile.ocr.pipeline_images import CaptureSource, expand_sources
from meter_reconcile.ocr.run_text_ocr import recognize_text
from meter_reconcile.records.store import RecordStore
from meter_reconcile.records.tabular import read_prior_rows
from meter_reconcile.review.assessor import review_captures
from meter_reconcile.validation.deviation import (
    DeviationResult,
    NOT_APPLICABLE,
    NOT_APPLICABLE_DISPLAY,
    compute_deviation,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Recognizer = Callable[[Any], str]


@dataclass(frozen=True)
class ReconcileConfig:
    enable_deskew: bool = True
    tie_break: TieBreak = TieBreak.FIRST
    pdf_dpi: int = 300


@dataclass(frozen=True)
class Resolution:
    entry: CaptureEntry
    match: MatchResult
    deviation: DeviationResult

    def as_dict(self) -> dict:
        record = self.match.record
        return {
            "sequence_id": self.entry.sequence_id,
            "identifier": self.entry.identifier_field,
            "consumption": self.entry.consumption_field,
            "name": record.name if record else NOT_FOUND,
            "meter_no": record.raw_identifier if record else NOT_FOUND,
            "prev_consumption": record.prior_consumption if record else NOT_FOUND,
            "match_stage": self.match.stage,
            "ambiguous": self.match.ambiguous,
            "candidates": [r.raw_identifier for r in self.match.candidates],
            "deviation": self.deviation.display,
            "deviation_value": self.deviation.value,
            "classification": self.deviation.classification,
        }


_NO_DEVIATION = DeviationResult(NOT_APPLICABLE_DISPLAY, NOT_APPLICABLE)


class ReconciliationEngine:
    """
    Owns the prior-period store and the capture ledger for one session.

    Matches and deviations are derived on every read, so edits show up
    immediately in resolutions, reviews and exports.
    """

    def __init__(self, config: ReconcileConfig | None = None, recognizer: Recognizer | None = None):
        self.config = config or ReconcileConfig()
        self.store = RecordStore()
        self.ledger = CaptureLedger()
        self.matcher = Matcher(self.store, tie_break=self.config.tie_break)
        self.diagnostics = DiagnosticLog()
        self._recognizer = recognizer

    @property
    def recognizer(self) -> Recognizer:
        if self._recognizer is None:
            enable_deskew = self.config.enable_deskew
            return lambda image: recognize_text(image, enable_deskew=enable_deskew)
        return self._recognizer

    # prior data

    def load_prior(self, rows: Iterable[Mapping]) -> int:
        count = self.store.load(rows)
        logger.info("Loaded %d prior records", count)
        return count

    def load_prior_file(self, path: PathLike) -> int:
        # TabularParseError propagates; the store keeps its previous contents
        return self.load_prior(read_prior_rows(path))

    # captures

    def add_capture(self, raw_text: str, preview_handle=None, source: str | None = None) -> CaptureEntry:
        fields = extract_meter_fields(raw_text)
        entry = self.ledger.append(
            preview_handle,
            raw_text,
            fields["identifier"],
            fields["consumption"],
        )
        self.diagnostics.append(format_capture_block(
            source or f"capture-{entry.sequence_id}",
            entry.identifier_field,
            entry.consumption_field,
            entry.raw_text,
        ))

        match = self.matcher.match(entry.identifier_field)
        if match.ambiguous:
            logger.warning(
                "Capture %d identifier %s matches %d prior records by suffix",
                entry.sequence_id,
                entry.identifier_field,
                len(match.candidates),
            )
        logger.debug(
            "Capture %d: identifier=%s consumption=%s matched=%s",
            entry.sequence_id,
            entry.identifier_field,
            entry.consumption_field,
            match.record.raw_identifier if match.matched else None,
        )
        return entry

    def _recognize(self, source: CaptureSource) -> str:
        if source.error is not None:
            self.diagnostics.append(format_error_note(source.label, source.error))
            return ""
        try:
            return self.recognizer(source.image) or ""
        except Exception as exc:
            logger.warning("Recognition failed for %s: %s", source.label, exc)
            self.diagnostics.append(format_error_note(source.label, exc))
            return ""

    def process_captures(self, inputs: Iterable) -> list[CaptureEntry]:
        """
        Recognize and append each input strictly in submission order.

        A failing or empty recognition still yields an entry carrying the
        NOT_FOUND placeholders; the batch always runs to the end.
        """
        entries = []
        for source in expand_sources(inputs, dpi=self.config.pdf_dpi):
            raw_text = self._recognize(source)
            entries.append(self.add_capture(raw_text, preview_handle=source.image, source=source.label))
        return entries

    def edit_capture(self, sequence_id: int, field: str, value) -> Resolution:
        entry = self.ledger.edit_field(sequence_id, field, value)
        resolution = self.resolve(entry)
        if field == IDENTIFIER_FIELD:
            self.diagnostics.append(format_edit_note(entry.sequence_id, entry.identifier_field, resolution.match))
        return resolution

    def reset(self) -> None:
        self.ledger.reset()
        self.diagnostics.clear()
        logger.info("Capture ledger cleared")

    # derived views

    def resolve(self, entry: CaptureEntry) -> Resolution:
        match = self.matcher.match(entry.identifier_field)
        if not match.matched:
            return Resolution(entry, match, _NO_DEVIATION)
        deviation = compute_deviation(match.record.prior_consumption, entry.consumption_field)
        return Resolution(entry, match, deviation)

    def resolutions(self) -> list[Resolution]:
        return [self.resolve(entry) for entry in self.ledger]

    def export(self) -> list[ExportRow]:
        return export_rows(self.ledger, self.store, self.matcher)

    def export_workbook(self, path: PathLike) -> Path:
        rows = self.export()
        out = write_workbook(rows, path)
        logger.info("Exported %d rows to %s", len(rows), out)
        return out

    def report(self) -> dict:
        resolutions = self.resolutions()
        reviews, summary = review_captures(resolutions)
        captures = []
        for resolution, review in zip(resolutions, reviews):
            item = resolution.as_dict()
            item["review"] = review
            captures.append(item)

        return {
            "rows": rows_as_dicts(self.export()),
            "captures": captures,
            "review": summary,
            "meta": {
                "prior_records": len(self.store),
                "captures": len(self.ledger),
                "tie_break": self.config.tie_break,
            },
        }


def reconcile_rows(
    prior_rows: Iterable[Mapping],
    recognized_texts: Iterable[str],
    config: ReconcileConfig | None = None,
) -> list[ExportRow]:
    engine = ReconciliationEngine(config=config)
    engine.load_prior(prior_rows)
    for text in recognized_texts:
        engine.add_capture(text)
    return engine.export()
