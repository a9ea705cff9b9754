import re
from decimal import Decimal, InvalidOperation

_NUMBER_RE = re.compile(r"[-+]?(\d+(\.\d*)?|\.\d+)")


def to_decimal(text, allow_commas=False):
    if text is None:
        return None
    text = str(text).strip()
    if allow_commas:
        text = text.replace(",", "")
    if not _NUMBER_RE.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None
