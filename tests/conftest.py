"""Test configuration and fixtures for dir2report."""

import struct
import zipfile
from xml.sax.saxutils import escape

import pytest

from dir2report.tools.tool_runner import ToolResult, ToolRunner

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
WORKSHEET_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet"


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption(
        "--run-tool-tests",
        action="store_true",
        default=False,
        help="Run tests that need real external tools (tree, unzip)",
    )
    parser.addoption(
        "--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "tool: test spawns a real external utility")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-tool-tests"):
        return
    skip_tool = pytest.mark.skip(reason="Only run when --run-tool-tests is given")
    for item in items:
        if "tool" in item.keywords:
            item.add_marker(skip_tool)


class FakeRunner(ToolRunner):
    """ToolRunner that records its calls and returns a canned result or raises."""

    def __init__(self, result=None, error=None, name="fake"):
        self.name = name
        self.result = result if result is not None else ToolResult(0, b"")
        self.error = error
        self.calls = []

    def invoke(self, args, cwd=None):
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_runner():
    return FakeRunner


def write_zip(path, parts, compression=zipfile.ZIP_STORED):
    with zipfile.ZipFile(path, "w", compression=compression) as zf:
        for name, data in parts.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def make_docx(tmp_path):
    """Factory writing a minimal .docx whose body holds the given WordprocessingML."""

    def factory(body_xml, name="document.docx", directory=None, compression=zipfile.ZIP_STORED):
        document = (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            f'<w:document xmlns:w="{WORD_NS}"><w:body>{body_xml}</w:body></w:document>'
        )
        return write_zip((directory or tmp_path) / name, {"word/document.xml": document}, compression)

    return factory


def sheet_xml(rows_xml):
    return f'<?xml version="1.0" encoding="UTF-8"?><worksheet xmlns="{MAIN_NS}"><sheetData>{rows_xml}</sheetData></worksheet>'


def shared_strings_xml(strings):
    items = "".join(f"<si><t>{escape(s)}</t></si>" for s in strings)
    return f'<sst xmlns="{MAIN_NS}" count="{len(strings)}" uniqueCount="{len(strings)}">{items}</sst>'


@pytest.fixture
def make_xlsx(tmp_path):
    """Factory writing a minimal workbook.

    ``sheets`` is a list of (sheet name, rows XML) pairs. Without a workbook index the
    sheet parts are still written, so the fallback enumeration can be exercised.
    """

    def factory(sheets, shared_strings=None, name="book.xlsx", directory=None, with_workbook=True):
        parts = {}
        sheet_entries = []
        relationships = []
        for index, (sheet_name, rows_xml) in enumerate(sheets, start=1):
            parts[f"xl/worksheets/sheet{index}.xml"] = sheet_xml(rows_xml)
            sheet_entries.append(f'<sheet name="{escape(sheet_name)}" sheetId="{index}" r:id="rId{index}"/>')
            relationships.append(
                f'<Relationship Id="rId{index}" Type="{WORKSHEET_TYPE}" Target="worksheets/sheet{index}.xml"/>'
            )
        if with_workbook:
            parts["xl/workbook.xml"] = (
                f'<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}"><sheets>{"".join(sheet_entries)}</sheets></workbook>'
            )
            parts["xl/_rels/workbook.xml.rels"] = (
                f'<Relationships xmlns="{PKG_REL_NS}">{"".join(relationships)}</Relationships>'
            )
        if shared_strings is not None:
            parts["xl/sharedStrings.xml"] = shared_strings_xml(shared_strings)
        return write_zip((directory or tmp_path) / name, parts)

    return factory


@pytest.fixture
def corrupt_member():
    """Overwrite the start of a member's compressed data so that inflating it fails."""

    def corrupt(path, member):
        with zipfile.ZipFile(path) as zf:
            offset = zf.getinfo(member).header_offset
        data = bytearray(path.read_bytes())
        name_length, extra_length = struct.unpack("<HH", data[offset + 26 : offset + 30])
        start = offset + 30 + name_length + extra_length
        data[start : start + 20] = b"\xff" * 20
        path.write_bytes(bytes(data))
        return path

    return corrupt


@pytest.fixture
def mark_encrypted():
    """Set the encryption flag on every member of an archive."""

    def mark(path):
        data = bytearray(path.read_bytes())
        for signature, flag_offset in ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8)):
            start = data.find(signature)
            while start != -1:
                data[start + flag_offset] |= 0x01
                start = data.find(signature, start + 4)
        path.write_bytes(bytes(data))
        return path

    return mark
