import csv
import zipfile
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from meter_reconcile.errors import TabularParseError
from meter_reconcile.records.store import cell_text

WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}


def _rows_from_table(header, body):
    # header text is kept verbatim; aliases match exactly
    keys = ["" if h is None else str(h) for h in header]
    rows = []
    for values in body:
        values = list(values)
        if all(cell_text(v) == "" for v in values):
            continue
        values += [""] * (len(keys) - len(values))
        rows.append({
            key: ("" if value is None else value)
            for key, value in zip(keys, values)
            if key
        })
    return rows


def _read_workbook(path):
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        it = ws.iter_rows(values_only=True)
        header = next(it, None)
        if header is None:
            return []
        return _rows_from_table(header, it)
    finally:
        wb.close()


def _read_csv(path):
    with open(path, newline="", encoding="utf-8-sig") as fh:
        reader = csv.reader(fh)
        header = next(reader, None)
        if header is None:
            return []
        return _rows_from_table(header, reader)


def read_prior_rows(path):
    """
    Read the first sheet of a workbook (or a CSV file) into row dicts.

    The first row is the header; empty cells come back as "".

    Raises:
        TabularParseError: the file is missing, unsupported or unreadable.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix not in WORKBOOK_SUFFIXES | CSV_SUFFIXES:
        raise TabularParseError(
            f"Unsupported prior data file {path.name!r}: expected one of "
            f"{', '.join(sorted(WORKBOOK_SUFFIXES | CSV_SUFFIXES))}"
        )

    try:
        if suffix in WORKBOOK_SUFFIXES:
            return _read_workbook(path)
        return _read_csv(path)
    except (
        OSError,
        zipfile.BadZipFile,
        InvalidFileException,
        SyntaxError,  # malformed XML inside the workbook
        UnicodeDecodeError,
        csv.Error,
        KeyError,
        ValueError,
    ) as exc:
        raise TabularParseError(f"Error reading {path.name}: {exc}") from exc
