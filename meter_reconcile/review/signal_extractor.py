from meter_reconcile.extract.meter_fields import NOT_FOUND


def extract_review_signals(match, deviation, consumption):
    signals = []

    if not match.matched:
        signals.append("UNMATCHED_CAPTURE")

    if match.ambiguous:
        signals.append("AMBIGUOUS_MATCH")

    # deviation only exists for matched rows with numeric readings
    if deviation.above_threshold:
        signals.append("DEVIATION_ABOVE_THRESHOLD")

    if not consumption or consumption == NOT_FOUND:
        signals.append("MISSING_READING")

    return signals
