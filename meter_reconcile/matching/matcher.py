from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from meter_reconcile.matching.normalize import digit_suffix, normalize_identifier
from meter_reconcile.records.store import PriorRecord, RecordStore

logger = logging.getLogger(__name__)

EXACT_STAGE = "exact"
SUFFIX_STAGE = "suffix"


class TieBreak(str, Enum):
    FIRST = "first"
    REJECT = "reject"


@dataclass(frozen=True)
class MatchResult:
    record: PriorRecord | None = None
    stage: str | None = None
    candidates: tuple[PriorRecord, ...] = ()

    @property
    def matched(self) -> bool:
        return self.record is not None

    @property
    def ambiguous(self) -> bool:
        return self.stage == SUFFIX_STAGE and len(self.candidates) > 1


NO_MATCH = MatchResult()


class Matcher:
    """
    Resolves OCR identifier text against a RecordStore.

    Exact canonical match first, then the trailing six digits of the
    identifier against the trailing six digits of each prior record.
    Several suffix candidates are resolved by the tie-break policy:
    FIRST keeps the earliest record in store order and flags the result
    as ambiguous, REJECT resolves to no match.
    """

    def __init__(self, store: RecordStore, tie_break: TieBreak = TieBreak.FIRST):
        self.store = store
        self.tie_break = TieBreak(tie_break)

    def match(self, raw_identifier_text) -> MatchResult:
        cleaned = normalize_identifier(raw_identifier_text)
        if not cleaned:
            return NO_MATCH

        exact = self.store.find_by_identifier(cleaned)
        if exact is not None:
            return MatchResult(exact, EXACT_STAGE, (exact,))

        suffix = digit_suffix(cleaned)
        if not suffix:
            return NO_MATCH

        candidates = tuple(
            r for r in self.store
            if r.canonical_identifier and digit_suffix(r.canonical_identifier) == suffix
        )
        if not candidates:
            return NO_MATCH

        if len(candidates) > 1:
            logger.debug(
                "Identifier %r shares suffix %s with %d prior records: %s",
                cleaned,
                suffix,
                len(candidates),
                ", ".join(r.raw_identifier for r in candidates),
            )
            if self.tie_break is TieBreak.REJECT:
                return MatchResult(None, SUFFIX_STAGE, candidates)

        return MatchResult(candidates[0], SUFFIX_STAGE, candidates)

    def find(self, raw_identifier_text) -> PriorRecord | None:
        return self.match(raw_identifier_text).record
