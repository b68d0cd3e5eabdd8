from pathlib import Path

import pytest

from dir2report.exceptions import ExtractionError, ToolNotFoundError
from dir2report.extractors import pdf_extractor
from dir2report.extractors.pdf_extractor import PdfExtractor, find_pdftotext
from dir2report.tools.tool_runner import ToolResult


def test_runs_pdftotext_in_layout_mode(fake_runner):
    runner = fake_runner(ToolResult(0, "Страница 1\n\x0c".encode("utf-8")), name="pdftotext")
    text = PdfExtractor(runner=runner).extract(Path("/docs/manual.pdf"))
    assert text == "Страница 1\n\x0c"
    assert runner.calls == [["-layout", "-enc", "UTF-8", str(Path("/docs/manual.pdf")), "-"]]


def test_invalid_utf8_output_is_replaced(fake_runner):
    runner = fake_runner(ToolResult(0, b"ok\xff"))
    assert PdfExtractor(runner=runner).extract(Path("a.pdf")) == "ok\ufffd"


def test_non_zero_exit(fake_runner):
    runner = fake_runner(ToolResult(1, b"", b"Syntax Error: Couldn't find trailer dictionary"))
    with pytest.raises(ExtractionError, match="status 1: Syntax Error"):
        PdfExtractor(runner=runner).extract(Path("broken.pdf"))


def test_tool_cannot_start(fake_runner):
    runner = fake_runner(error=ToolNotFoundError("pdftotext", "executable not found"))
    with pytest.raises(ExtractionError, match="pdftotext: executable not found"):
        PdfExtractor(runner=runner).extract(Path("a.pdf"))


def test_not_installed(tmp_path, monkeypatch):
    monkeypatch.setattr(pdf_extractor.shutil, "which", lambda name: None)
    with pytest.raises(ExtractionError, match="pdftotext not found"):
        PdfExtractor(app_dir=tmp_path).extract(tmp_path / "a.pdf")


@pytest.fixture
def app_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(pdf_extractor.shutil, "which", lambda name: "/usr/bin/pdftotext")
    return tmp_path


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_search_order_prefers_application_directory(app_dir):
    _touch(app_dir / "poppler" / "pdftotext")
    _touch(app_dir / "tools" / "poppler" / "pdftotext")
    local = _touch(app_dir / "pdftotext")
    assert find_pdftotext(app_dir, windows=False) == str(local)


def test_search_order_tools_poppler_before_poppler(app_dir):
    _touch(app_dir / "poppler" / "pdftotext")
    tools = _touch(app_dir / "tools" / "poppler" / "pdftotext")
    assert find_pdftotext(app_dir, windows=False) == str(tools)


def test_search_uses_windows_executable_name(app_dir):
    _touch(app_dir / "poppler" / "pdftotext")
    exe = _touch(app_dir / "poppler" / "pdftotext.exe")
    assert find_pdftotext(app_dir, windows=True) == str(exe)


def test_search_falls_back_to_path(app_dir):
    assert find_pdftotext(app_dir, windows=False) == "/usr/bin/pdftotext"
