import time
from pathlib import Path

from meter_reconcile.api import ReconcileConfig, ReconciliationEngine


def run_pipeline(prior_path, capture_inputs, config=None, recognizer=None):
    start = time.time()
    engine = ReconciliationEngine(config=config or ReconcileConfig(), recognizer=recognizer)

    # Phase 1: prior-period records
    engine.load_prior_file(Path(prior_path))

    # Phase 2: OCR, one capture at a time in submission order
    engine.process_captures(capture_inputs)

    # Phase 3: reconciliation + review
    out = engine.report()

    end = time.time()
    out["meta"]["prior_file"] = Path(prior_path).name
    out["meta"]["processing_time_ms"] = int((end - start) * 1000)
    out["diagnostics"] = list(engine.diagnostics.blocks)
    return engine, out
