import numpy as np
from PIL import Image

from meter_reconcile.diagnostics import SNIPPET_LIMIT, DiagnosticLog, format_capture_block
from meter_reconcile.ocr.pdf_to_images import pdf_to_images, resolve_poppler_path
from meter_reconcile.ocr.pipeline_images import CaptureSource, expand_sources
from meter_reconcile.ocr.run_text_ocr import lines_from_result
from meter_reconcile.preprocess.deskew import limit_size, prepare_meter_image


def test_lines_from_paddle_result():
    box = [[0, 0], [10, 0], [10, 5], [0, 5]]
    result = [[
        [box, ("Meter No.", 0.98)],
        [box, ("  ", 0.5)],
        [box, ("AJP-15-24-392020", 0.91)],
    ]]
    assert lines_from_result(result) == ["Meter No.", "AJP-15-24-392020"]
    assert lines_from_result([None]) == []
    assert lines_from_result(None) == []


def test_large_photos_are_shrunk():
    image = np.full((1000, 3000, 3), 255, dtype=np.uint8)
    resized, scale = limit_size(image)
    assert resized.shape[:2] == (667, 2000)
    assert round(scale, 3) == 0.667


def test_blank_image_is_not_rotated():
    image = np.full((200, 300, 3), 255, dtype=np.uint8)
    out, meta = prepare_meter_image(image)
    assert out.shape == image.shape
    assert meta["deskew"]["applied"] is False
    assert meta["deskew"]["detected_angle_deg"] == 0.0

    _, meta = prepare_meter_image(image, enable_deskew=False)
    assert meta["deskew"] == {"enabled": False, "applied": False}


def test_expand_sources_keeps_order(tmp_path):
    array = np.zeros((2, 2))
    sources = expand_sources([tmp_path / "a.jpg", "b.png", array, CaptureSource("c", "handle")])
    assert [s.label for s in sources] == ["a.jpg", "b.png", "capture-3", "c"]
    assert sources[2].image is array


def test_unreadable_pdf_becomes_error_source(tmp_path):
    pdf = tmp_path / "scan.pdf"
    pdf.write_bytes(b"not a pdf")
    sources = expand_sources([pdf, "after.jpg"])
    assert sources[0].label == "scan.pdf"
    assert sources[0].error
    assert sources[1].label == "after.jpg"


def test_capture_block_truncates_snippet():
    block = format_capture_block("a.jpg", "AJP1", "12", "x" * 2000)
    assert "FILE: a.jpg\n" in block
    assert "DETECTED METER: AJP1\n" in block
    assert "DETECTED QTY: 12\n" in block
    snippet = block.split("OCR TEXT SNIPPET:\n", 1)[1]
    assert snippet == "x" * SNIPPET_LIMIT + "\n"


def test_diagnostic_log():
    log = DiagnosticLog()
    log.append("one")
    log.append("two")
    assert log.render() == "one\n\ntwo"
    log.clear()
    assert len(log) == 0


def test_pdf_pages_stay_in_memory(tmp_path, monkeypatch):
    calls = []

    def _fake_convert(path, **kwargs):
        calls.append((path, kwargs))
        return [Image.new("RGB", (4, 3), (255, 0, 0)), Image.new("L", (2, 2), 0)]

    monkeypatch.setattr("meter_reconcile.ocr.pdf_to_images.convert_from_path", _fake_convert)
    monkeypatch.delenv("POPPLER_PATH", raising=False)

    pages = pdf_to_images(tmp_path / "scan.pdf", dpi=150)
    assert calls == [(str(tmp_path / "scan.pdf"), {"dpi": 150})]
    assert pages[0].shape == (3, 4, 3)
    assert pages[0][0, 0].tolist() == [0, 0, 255]
    assert pages[1].shape == (2, 2, 3)

    sources = expand_sources(["first.jpg", tmp_path / "scan.pdf", "last.jpg"])
    assert [s.label for s in sources] == ["first.jpg", "scan.pdf#page-1", "scan.pdf#page-2", "last.jpg"]
    assert sources[1].image.shape == (3, 4, 3)
    assert list(tmp_path.iterdir()) == []


def test_poppler_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.delenv("POPPLER_PATH", raising=False)
    assert resolve_poppler_path() is None

    monkeypatch.setenv("POPPLER_PATH", str(tmp_path))
    assert resolve_poppler_path() == str(tmp_path)

    binary = tmp_path / "pdfinfo"
    binary.write_text("", encoding="utf-8")
    monkeypatch.setenv("POPPLER_PATH", str(binary))
    assert resolve_poppler_path() == str(tmp_path)
