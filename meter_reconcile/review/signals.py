REVIEW_SIGNALS = {
    "DEVIATION_ABOVE_THRESHOLD": {
        "weight": 0.35,
        "description": "Current reading deviates more than 30% from the prior period"
    },
    "UNMATCHED_CAPTURE": {
        "weight": 0.30,
        "description": "Captured identifier matches no prior record"
    },
    "AMBIGUOUS_MATCH": {
        "weight": 0.20,
        "description": "Identifier suffix is shared by several prior records"
    },
    "MISSING_READING": {
        "weight": 0.15,
        "description": "Current consumption could not be read"
    }
}
