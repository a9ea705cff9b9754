import re

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9\-]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")

SUFFIX_LENGTH = 6


def normalize_identifier(raw):
    """
    Canonical form of a meter identifier.

    Keeps ASCII letters, digits and hyphens only, upper-cased.
    Returns "" for None, empty or whitespace-only input.
    """
    if raw is None:
        return ""
    return _NON_IDENTIFIER_RE.sub("", str(raw)).upper().strip()


def digit_suffix(text, length=SUFFIX_LENGTH):
    # digits are collected across the whole string, then the tail is taken
    digits = _NON_DIGIT_RE.sub("", text or "")
    return digits[-length:] if length > 0 else ""
