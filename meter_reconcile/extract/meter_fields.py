import re

from meter_reconcile.matching.normalize import normalize_identifier

NOT_FOUND = "Not Found"


IDENTIFIER_PATTERNS = [
    # value following a "Meter No." label, up to the end of its line
    re.compile(r"Meter\s*No\.?\s*:?\s*([A-Z0-9\-][A-Z0-9\- \t]{4,39})", re.IGNORECASE),
    re.compile(r"(AJP[^\s,]*)", re.IGNORECASE),
    re.compile(r"([A-Z0-9]{2,3}-\d{1,2}-\d{1,2}-\d{3,})", re.IGNORECASE),
    re.compile(r"\b([A-Z0-9\-]{6,})\b", re.IGNORECASE),
]


CONSUMPTION_PATTERNS = [
    re.compile(r"Qty\s*:?\s*[\r\n\s]*([0-9]{1,5})", re.IGNORECASE),
    re.compile(r"Quantity\s*:?\s*[\r\n\s]*([0-9]{1,5})", re.IGNORECASE),
    # best effort: first isolated small number anywhere
    re.compile(r"\b([0-9]{1,4})\b"),
]


def _first_match(text, patterns):
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            return m.group(1)
    return None


def extract_identifier(text):
    value = _first_match(text or "", IDENTIFIER_PATTERNS)
    if value is None:
        return ""
    return normalize_identifier(value)


def extract_consumption(text):
    return _first_match(text or "", CONSUMPTION_PATTERNS) or ""


def extract_meter_fields(text):
    """
    Identifier and consumption read from free-form OCR text.

    Fields nothing could be read for carry the NOT_FOUND placeholder.
    """
    return {
        "identifier": extract_identifier(text) or NOT_FOUND,
        "consumption": extract_consumption(text) or NOT_FOUND,
    }
