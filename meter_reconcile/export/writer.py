import json
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from meter_reconcile.export.exporter import EXPORT_COLUMNS
from meter_reconcile.utils.json_encoder import DecimalEncoder

RESULTS_SHEET = "Results"
DEFAULT_WORKBOOK_NAME = "meter_reconcile_results.xlsx"


def auto_fit_columns(ws, min_width=10, max_width=60):
    for column in ws.columns:
        values = [str(cell.value) for cell in column if cell.value not in (None, "")]
        if not values:
            continue
        width = max(min_width, min(max_width, max(len(v) for v in values) + 2))
        ws.column_dimensions[column[0].column_letter].width = width


def write_workbook(rows, path):
    """
    Write export rows to a single "Results" sheet.

    Cells are written as text so identifiers and readings survive a
    re-import verbatim.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = RESULTS_SHEET
    ws.append(EXPORT_COLUMNS)

    header_fill = PatternFill("solid", fgColor="D9E1F2")
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.fill = header_fill

    for row in rows:
        ws.append(row.as_list())
        # "=..." would otherwise be stored as a live formula
        for cell in ws[ws.max_row]:
            if isinstance(cell.value, str):
                cell.data_type = "s"

    ws.freeze_panes = "A2"
    auto_fit_columns(ws)
    wb.save(path)
    return path


def write_json(report, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False, cls=DecimalEncoder)
    return path
