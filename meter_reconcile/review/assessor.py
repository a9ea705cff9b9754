from meter_reconcile.review.signal_extractor import extract_review_signals
from meter_reconcile.review.scorer import score_review, summarize_review


def review_capture(match, deviation, consumption):
    signals = extract_review_signals(match, deviation, consumption)
    return score_review(signals)


def review_captures(resolutions):
    reviews = [
        review_capture(r.match, r.deviation, r.entry.consumption_field)
        for r in resolutions
    ]
    return reviews, summarize_review(reviews)
