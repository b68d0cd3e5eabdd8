import codecs

import pytest

from dir2report.encoding.no_bom_mode import NoBomTextMode
from dir2report.encoding.text_decoder import TextDecoder
from dir2report.exceptions import ExtractionError
from dir2report.extractors.dispatcher import ExtractorDispatcher
from dir2report.extractors.pdf_extractor import PdfExtractor
from dir2report.extractors.truncation import SHORT_TRUNCATION_NOTE
from dir2report.file_system_tree.file_entry import FileEntry
from dir2report.tools.tool_runner import ToolResult


def entry_for(path):
    return FileEntry(path, path.name, path.stat().st_size if path.exists() else 0)


@pytest.fixture
def dispatcher():
    return ExtractorDispatcher(decoder=TextDecoder(NoBomTextMode.AUTO_UTF8_THEN_LOCALE, "cp1251"))


def test_plain_text_goes_through_the_decoder(tmp_path, dispatcher):
    utf8 = tmp_path / "utf8.txt"
    utf8.write_bytes("héllo".encode("utf-8"))
    legacy = tmp_path / "legacy.ini"
    legacy.write_bytes("ключ=значение".encode("cp1251"))
    utf16 = tmp_path / "utf16.ps1"
    utf16.write_bytes(codecs.BOM_UTF16_LE + "Write-Host".encode("utf-16-le"))

    assert dispatcher.extract(entry_for(utf8)) == "héllo"
    assert dispatcher.extract(entry_for(legacy)) == "ключ=значение"
    assert dispatcher.extract(entry_for(utf16)) == "Write-Host"


def test_unknown_extension_is_plain_text(tmp_path, dispatcher):
    path = tmp_path / "Makefile"
    path.write_text("all:\n\techo ok\n")
    assert dispatcher.extract(entry_for(path)) == "all:\n\techo ok\n"


@pytest.mark.parametrize("name,prefix", [("old.doc", "[Legacy Word"), ("OLD.XLS", "[Legacy Excel")])
def test_legacy_formats_get_a_placeholder(tmp_path, dispatcher, name, prefix):
    path = tmp_path / name
    path.write_bytes(b"\xd0\xcf\x11\xe0")
    assert dispatcher.extract(entry_for(path)).startswith(prefix)


def test_docx_and_xlsx_are_routed(make_docx, make_xlsx, dispatcher):
    docx = make_docx("<w:p><w:r><w:t>from word</w:t></w:r></w:p>")
    xlsm = make_xlsx([("S", '<row r="1"><c r="A1"><v>5</v></c></row>')], name="macro.xlsm")
    assert dispatcher.extract(entry_for(docx)) == "from word\n"
    assert dispatcher.extract(entry_for(xlsm)) == "----- SHEET: S -----\n1\t5"


def test_cap_applies_to_every_format(tmp_path):
    path = tmp_path / "long.md"
    path.write_text("z" * 500)
    dispatcher = ExtractorDispatcher(max_output_chars=10)
    assert dispatcher.extract(entry_for(path)) == "z" * 5 + SHORT_TRUNCATION_NOTE


def test_pdf_output_is_capped(tmp_path, fake_runner):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")
    runner = fake_runner(ToolResult(0, b"This PDF has far more than ten characters of text."))
    dispatcher = ExtractorDispatcher(pdf_extractor=PdfExtractor(runner=runner), max_output_chars=10)
    text = dispatcher.extract(entry_for(path))
    assert len(text) <= 10
    assert text.endswith(SHORT_TRUNCATION_NOTE)


def test_read_failure_is_an_extraction_error(tmp_path, dispatcher):
    missing = tmp_path / "gone.txt"
    with pytest.raises(ExtractionError):
        dispatcher.extract(FileEntry(missing, "gone.txt", 0))
