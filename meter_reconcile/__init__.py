from meter_reconcile.converter import reconcile
from meter_reconcile.api import (
    ReconcileConfig,
    ReconciliationEngine,
    Resolution,
    reconcile_rows,
)
from meter_reconcile.matching.matcher import Matcher, MatchResult, TieBreak
from meter_reconcile.matching.normalize import normalize_identifier
from meter_reconcile.validation.deviation import compute_deviation

__all__ = [
    "ReconcileConfig",
    "ReconciliationEngine",
    "Resolution",
    "Matcher",
    "MatchResult",
    "TieBreak",
    "normalize_identifier",
    "compute_deviation",
    "reconcile",
    "reconcile_rows",
]
