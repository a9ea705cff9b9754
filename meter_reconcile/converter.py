from pathlib import Path

from meter_reconcile.api import ReconcileConfig
from meter_reconcile.export.writer import write_json
from meter_reconcile.pipeline import run_pipeline


def reconcile(
    prior_path: str | Path,
    capture_inputs,
    workbook_out: str | Path | None = None,
    json_out: str | Path | None = None,
    config: ReconcileConfig | None = None,
    recognizer=None,
) -> dict:
    """
    Reconcile a prior-period spreadsheet against meter photographs.

    Args:
        prior_path (str | Path): .xlsx/.xlsm/.csv with the prior records
        capture_inputs: image or PDF paths, in capture order
        workbook_out (str | Path | None): optional export workbook
        json_out (str | Path | None): optional JSON report

    Returns:
        dict: report with export rows, per-capture detail and review summary
    """
    engine, report = run_pipeline(prior_path, capture_inputs, config=config, recognizer=recognizer)
    if workbook_out:
        engine.export_workbook(workbook_out)
    if json_out:
        write_json(report, json_out)
    return report
