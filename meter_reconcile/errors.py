class ReconcileError(Exception):
    """Base class for errors reported by meter_reconcile."""


class TabularParseError(ReconcileError):
    """The prior-period spreadsheet could not be read."""


class RecognizerUnavailableError(ReconcileError, RuntimeError):
    """The OCR runtime could not be loaded."""
