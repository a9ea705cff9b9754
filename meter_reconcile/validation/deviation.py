from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from meter_reconcile.validation.normalize import to_decimal

BELOW_THRESHOLD = "BELOW_THRESHOLD"
ABOVE_THRESHOLD = "ABOVE_THRESHOLD"
NOT_APPLICABLE = "NOT_APPLICABLE"

DEVIATION_THRESHOLD = Decimal("30")
NOT_APPLICABLE_DISPLAY = "—"

_ONE_PLACE = Decimal("0.1")


@dataclass(frozen=True)
class DeviationResult:
    display: str
    classification: str
    value: Decimal | None = None

    @property
    def above_threshold(self) -> bool:
        return self.classification == ABOVE_THRESHOLD


_NOT_APPLICABLE_RESULT = DeviationResult(NOT_APPLICABLE_DISPLAY, NOT_APPLICABLE)


def compute_deviation(prior_text, current_text) -> DeviationResult:
    """
    Absolute percentage deviation of the current reading from the prior one.

    Thousands separators are accepted in the prior value only. A prior
    value that is missing, unparsable or zero, or an unparsable current
    value, yields NOT_APPLICABLE.
    """
    prior = to_decimal(prior_text, allow_commas=True)
    current = to_decimal(current_text)

    if prior is None or prior == 0 or current is None:
        return _NOT_APPLICABLE_RESULT

    deviation = abs((current - prior) / prior) * 100
    try:
        rounded = deviation.quantize(_ONE_PLACE, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # beyond context precision
        rounded = deviation.to_integral_value(rounding=ROUND_HALF_UP)

    # threshold applies to the unrounded value; exactly 30 is not above
    classification = ABOVE_THRESHOLD if deviation > DEVIATION_THRESHOLD else BELOW_THRESHOLD
    return DeviationResult(f"{rounded}%", classification, rounded)
