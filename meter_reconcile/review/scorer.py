from meter_reconcile.review.signals import REVIEW_SIGNALS


def score_review(signals):
    review_score = 0.0
    explanations = {}

    for sig in signals:
        meta = REVIEW_SIGNALS.get(sig)
        if not meta or sig in explanations:
            continue

        review_score += meta["weight"]
        explanations[sig] = meta["description"]

    review_score = min(review_score, 1.0)

    return {
        "review_score": round(review_score, 2),
        "needs_review": bool(explanations),
        "review_flags": list(explanations.keys()),
        "explanations": explanations
    }


def summarize_review(capture_reviews):
    counts = {sig: 0 for sig in REVIEW_SIGNALS}
    flagged = 0

    for review in capture_reviews:
        if review["needs_review"]:
            flagged += 1
        for sig in review["review_flags"]:
            counts[sig] += 1

    total = len(capture_reviews)
    return {
        "captures": total,
        "flagged": flagged,
        "clean": total - flagged,
        "signal_counts": counts,
    }
