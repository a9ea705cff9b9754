from meter_reconcile.export.exporter import EXPORT_COLUMNS, export_rows, rows_as_dicts
from meter_reconcile.export.writer import write_workbook
from meter_reconcile.ledger.capture import CaptureLedger
from meter_reconcile.records.store import RecordStore
from meter_reconcile.records.tabular import read_prior_rows

PRIOR_ROWS = [
    {"Name": "Ann", "Meter No.": "M-100001", "Consumption": "100"},
    {"Name": "Bob", "Meter No.": "M-200002", "Consumption": "1,200"},
    {"Name": "Cy", "Meter No.": "M-300003", "Consumption": "300"},
]


def _ledger(*captures):
    ledger = CaptureLedger()
    for identifier, consumption in captures:
        ledger.append(None, "", identifier, consumption)
    return ledger


def test_export_lists_captures_then_unmatched_prior_rows():
    store = RecordStore(PRIOR_ROWS)
    ledger = _ledger(("m200002", "1210"), ("ZZ", "5"))

    rows = rows_as_dicts(export_rows(ledger, store))

    assert len(rows) == 4
    assert rows[0] == {
        "Name": "Bob",
        "Meter No.": "M-200002",
        "Prev Consumption": "1,200",
        "Current Consumption": "1210",
    }
    assert rows[1] == {
        "Name": "Not Found",
        "Meter No.": "Not Found",
        "Prev Consumption": "Not Found",
        "Current Consumption": "5",
    }
    assert [r["Name"] for r in rows[2:]] == ["Ann", "Cy"]
    assert all(r["Current Consumption"] == "" for r in rows[2:])
    assert all(list(r) == EXPORT_COLUMNS for r in rows)


def test_export_without_captures_lists_all_prior_rows():
    rows = export_rows(CaptureLedger(), RecordStore(PRIOR_ROWS))
    assert [r.name for r in rows] == ["Ann", "Bob", "Cy"]


def test_blank_identifier_prior_rows_are_not_exported():
    store = RecordStore(PRIOR_ROWS + [{"Name": "Nobody", "Meter No.": "", "Consumption": "9"}])
    rows = export_rows(CaptureLedger(), store)
    assert "Nobody" not in [r.name for r in rows]


def test_export_uses_latest_edit():
    store = RecordStore(PRIOR_ROWS)
    ledger = _ledger(("ZZ", "5"))
    ledger.edit_field(1, "identifier", "M-300003")
    rows = export_rows(ledger, store)
    assert rows[0].name == "Cy"
    assert [r.name for r in rows[1:]] == ["Ann", "Bob"]


def test_suffix_match_consumes_prior_row():
    store = RecordStore(PRIOR_ROWS)
    rows = export_rows(_ledger(("XX100001", "")), store)
    assert rows[0].name == "Ann"
    assert rows[0].current_consumption == ""
    assert [r.name for r in rows[1:]] == ["Bob", "Cy"]


def test_two_captures_of_one_meter_consume_it_once():
    store = RecordStore(PRIOR_ROWS)
    rows = export_rows(_ledger(("M-100001", "1"), ("M-100001", "2")), store)
    assert [r.name for r in rows] == ["Ann", "Ann", "Bob", "Cy"]


def test_reimported_export_preserves_unmatched_rows():
    store = RecordStore(PRIOR_ROWS)
    rows = export_rows(_ledger(("M-200002", "1300")), store)

    reloaded = RecordStore(rows_as_dicts(rows))
    unmatched = [(r.name, r.raw_identifier, r.prior_consumption) for r in reloaded][1:]
    assert unmatched == [("Ann", "M-100001", "100"), ("Cy", "M-300003", "300")]


def test_workbook_round_trip(tmp_path):
    store = RecordStore(PRIOR_ROWS)
    rows = export_rows(_ledger(("M-200002", "1300")), store)

    path = write_workbook(rows, tmp_path / "out" / "results.xlsx")
    assert path.exists()

    reread = read_prior_rows(path)
    assert [r["Name"] for r in reread] == ["Bob", "Ann", "Cy"]
    reloaded = RecordStore(reread)
    assert [r.prior_consumption for r in reloaded] == ["1,200", "100", "300"]
    assert [r.raw_identifier for r in reloaded] == ["M-200002", "M-100001", "M-300003"]


def test_workbook_keeps_formula_like_text(tmp_path):
    store = RecordStore([{"Name": "=Smith", "Meter No.": "M-1", "Consumption": "=1+1"}])
    ledger = _ledger(("M-1", '=HYPERLINK("http://x")'))

    path = write_workbook(export_rows(ledger, store), tmp_path / "results.xlsx")

    reread = read_prior_rows(path)
    assert reread[0]["Name"] == "=Smith"
    assert reread[0]["Prev Consumption"] == "=1+1"
    assert reread[0]["Current Consumption"] == '=HYPERLINK("http://x")'
    assert [r.name for r in RecordStore(reread)] == ["=Smith"]
