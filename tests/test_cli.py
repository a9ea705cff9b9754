import json

from meter_reconcile import cli
from meter_reconcile.records.tabular import read_prior_rows


def _fake_recognize_text(image, enable_deskew=True):
    return {
        "one.jpg": "Meter No. M-100001\nQty 130",
        "two.jpg": "",
    }.get(image.name, "")


def test_cli_writes_workbook_and_report(tmp_path, monkeypatch):
    monkeypatch.setattr("meter_reconcile.api.recognize_text", _fake_recognize_text)
    prior = tmp_path / "prior.csv"
    prior.write_text("Name,Meter No.,Consumption\nAnn,M-100001,100\nBob,M-200002,200\n", encoding="utf-8")
    workbook = tmp_path / "out.xlsx"
    report_path = tmp_path / "report.json"

    code = cli.main([str(prior), "one.jpg", "two.jpg", "-o", str(workbook), "--json", str(report_path)])

    assert code == 0
    rows = read_prior_rows(workbook)
    assert [r["Name"] for r in rows] == ["Ann", "Not Found", "Bob"]
    with report_path.open("r", encoding="utf-8") as fh:
        report = json.load(fh)
    assert report["captures"][0]["deviation"] == "30.0%"
    assert report["captures"][0]["classification"] == "BELOW_THRESHOLD"


def test_cli_reports_unreadable_prior_file(tmp_path, capsys):
    code = cli.main([str(tmp_path / "prior.ods"), "one.jpg"])
    assert code == 1
    assert "Unsupported prior data file" in capsys.readouterr().err
