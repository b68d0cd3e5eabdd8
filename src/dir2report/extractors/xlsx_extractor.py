"""Text extraction from Excel Open XML (.xlsx, .xlsm) workbooks.

Every worksheet becomes a block that starts with a ``----- SHEET: <name> -----``
line, followed by one line per non-empty row: the row number and then the
tab-separated cell values from the row's first to its last non-empty column.
Blocks are separated by a blank line.

All parts are read with a streaming parser, and output stops growing as soon as
the character cap is exceeded, so very large sheets are never fully materialized.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import IO, Dict, Iterator, List, Optional, Sequence, Tuple
from xml.etree.ElementTree import ParseError

from dir2report.exceptions import ExtractionError
from dir2report.tools.archive_expander import ArchiveExpander, expanded_archive

from .base import ContentExtractor
from .truncation import truncate_text
from .xml_utils import iter_events, namespaced_attribute

logger = logging.getLogger(__name__)

SHEET_HEADER = "----- SHEET: {name} -----"

_CELL_LETTERS = re.compile(r"[A-Za-z]+")
_DIGITS = re.compile(r"(\d+)")


def column_index(reference: str) -> Optional[int]:
    """Convert the letters of a cell reference to a zero-based column index.

    Returns None when the reference has no leading letters.

    Example:
        >>> column_index("A1"), column_index("Z9"), column_index("AA10"), column_index("ab3")
        (0, 25, 26, 27)
        >>> column_index("12") is None
        True
    """
    match = _CELL_LETTERS.match(reference)
    if not match:
        return None
    index = 0
    for letter in match.group().upper():
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index - 1


def natural_sort_key(text: str) -> List:
    """Sort key that orders embedded numbers numerically.

    Example:
        >>> sorted(["sheet10.xml", "sheet2.xml", "sheet1.xml"], key=natural_sort_key)
        ['sheet1.xml', 'sheet2.xml', 'sheet10.xml']
    """
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS.split(text)]


def read_shared_strings(source: IO[bytes]) -> List[str]:
    """Read the shared-string table, ignoring phonetic (``rPh``) runs.

    Example:
        >>> import io
        >>> xml = (b'<sst><si><t>plain</t></si>'
        ...        b'<si><r><t>rich</t></r><r><t> text</t></r><rPh><t>ignored</t></rPh></si></sst>')
        >>> read_shared_strings(io.BytesIO(xml))
        ['plain', 'rich text']
    """
    strings: List[str] = []
    current: List[str] = []
    stack: List[str] = []
    for event, elem, name in iter_events(source):
        if event == "start":
            stack.append(name)
            if name == "si":
                current = []
            continue

        stack.pop()
        if name == "t" and "rPh" not in stack:
            current.append(elem.text or "")
        elif name == "si":
            strings.append("".join(current))
            elem.clear()
    return strings


def _cell_text(cell_type: str, value: Optional[str], inline: List[str], shared_strings: Sequence[str]) -> str:
    if cell_type == "inlineStr":
        return "".join(inline)
    if value is None:
        return ""
    if cell_type == "s":
        try:
            index = int(value.strip())
        except ValueError:
            return ""
        return shared_strings[index] if 0 <= index < len(shared_strings) else ""
    if cell_type == "b":
        return "TRUE" if value.strip() == "1" else "FALSE"
    return value


def _row_number(raw: Optional[str], previous: int) -> int:
    if raw:
        try:
            return int(raw)
        except ValueError:
            pass
    return previous + 1


def _format_row(row_number: int, cells: Dict[int, str]) -> str:
    first, last = min(cells), max(cells)
    return "\t".join([str(row_number)] + [cells.get(col, "") for col in range(first, last + 1)])


def iter_sheet_rows(source: IO[bytes], shared_strings: Sequence[str]) -> Iterator[str]:
    """Yield one formatted line per non-empty row of a worksheet stream.

    Cells without a reference take the column after the previous cell; rows without
    a number take the number after the previous row.

    Example:
        >>> import io
        >>> xml = (b'<worksheet><sheetData>'
        ...        b'<row r="1"><c r="A1" t="s"><v>0</v></c><c r="C1"><v>42</v></c></row>'
        ...        b'<row r="2"></row>'
        ...        b'<row r="3"><c r="B3" t="b"><v>1</v></c><c t="inlineStr"><is><t>x</t></is></c></row>'
        ...        b'</sheetData></worksheet>')
        >>> list(iter_sheet_rows(io.BytesIO(xml), ["Name"]))
        ['1\\tName\\t\\t42', '3\\tTRUE\\tx']
    """
    stack: List[str] = []
    row_number = 0
    cells: Dict[int, str] = {}
    column = -1
    cell_type = "n"
    value: Optional[str] = None
    inline: List[str] = []

    for event, elem, name in iter_events(source):
        if event == "start":
            stack.append(name)
            if name == "row":
                row_number = _row_number(elem.get("r"), row_number)
                cells = {}
                column = -1
            elif name == "c":
                referenced = column_index(elem.get("r") or "")
                column = referenced if referenced is not None else column + 1
                cell_type = elem.get("t") or "n"
                value = None
                inline = []
            continue

        stack.pop()
        if name == "v" and stack and stack[-1] == "c":
            value = elem.text or ""
        elif name == "t" and "is" in stack and "rPh" not in stack:
            inline.append(elem.text or "")
        elif name == "c":
            text = _cell_text(cell_type, value, inline, shared_strings)
            if text:
                cells[column] = text
            elem.clear()
        elif name == "row":
            if cells:
                yield _format_row(row_number, cells)
            elem.clear()


class XlsxExtractor(ContentExtractor):
    """Extract cell values from .xlsx/.xlsm workbooks.

    Sheets are listed in workbook order using ``xl/workbook.xml`` and its relationship
    part. When those cannot be used, every ``xl/worksheets/*.xml`` part is read in
    natural filename order instead, named after its file stem.

    Attributes:
        expander (Optional[ArchiveExpander]): Expander for the zip container.
        max_output_chars (int): Character cap, 0 for unlimited.
    """

    def __init__(self, expander: Optional[ArchiveExpander] = None, max_output_chars: int = 0) -> None:
        self.expander = expander
        self.max_output_chars = max_output_chars

    def extract(self, path: Path) -> str:
        with expanded_archive(path, self.expander) as unpacked:
            try:
                return self.render_workbook(unpacked)
            except ParseError as e:
                raise ExtractionError(f"Malformed workbook XML: {e}", str(path)) from e

    def render_workbook(self, unpacked: Path) -> str:
        """Render an expanded workbook directory as text.

        Raises:
            ExtractionError: If the workbook has no worksheets.
            xml.etree.ElementTree.ParseError: If a part is malformed.
        """
        shared_strings: List[str] = []
        shared_part = unpacked / "xl" / "sharedStrings.xml"
        if shared_part.is_file():
            with open(shared_part, "rb") as f:
                shared_strings = read_shared_strings(f)

        sheets = self.workbook_sheets(unpacked) or self.fallback_sheets(unpacked)
        if not sheets:
            raise ExtractionError("No worksheets found; not an Excel workbook")

        limit = self.max_output_chars
        lines: List[str] = []
        length = 0
        truncated = False

        def append(line: str) -> bool:
            nonlocal length
            length += len(line) + (1 if lines else 0)
            lines.append(line)
            return bool(limit) and length > limit

        for name, part in sheets:
            if not part.is_file():
                logger.warning("Worksheet part %s for sheet %r is missing", part.name, name)
                continue
            if lines:
                append("")
            if append(SHEET_HEADER.format(name=name)):
                truncated = True
                break
            with open(part, "rb") as f:
                for row in iter_sheet_rows(f, shared_strings):
                    if append(row):
                        truncated = True
                        break
            if truncated:
                break

        text = "\n".join(lines)
        return truncate_text(text, limit) if truncated else text

    def workbook_sheets(self, unpacked: Path) -> List[Tuple[str, Path]]:
        """Return (name, part) pairs in workbook order, or an empty list if unavailable."""
        workbook = unpacked / "xl" / "workbook.xml"
        rels = unpacked / "xl" / "_rels" / "workbook.xml.rels"
        if not workbook.is_file() or not rels.is_file():
            return []

        try:
            targets: Dict[str, str] = {}
            with open(rels, "rb") as f:
                for event, elem, name in iter_events(f):
                    if event == "end" and name == "Relationship":
                        rel_id, target = elem.get("Id"), elem.get("Target")
                        if rel_id and target:
                            targets[rel_id] = target

            sheets: List[Tuple[str, Path]] = []
            with open(workbook, "rb") as f:
                for event, elem, name in iter_events(f):
                    if event != "end" or name != "sheet":
                        continue
                    rel_id = namespaced_attribute(elem, "id")
                    target = targets.get(rel_id) if rel_id else None
                    if target is None:
                        logger.debug("Sheet %r has no worksheet relationship", elem.get("name"))
                        continue
                    sheets.append((elem.get("name") or "", unpacked / self._resolve_target(target)))
        except ParseError as e:
            logger.debug("Unreadable workbook index, listing worksheets instead: %s", e)
            return []
        return sheets

    @staticmethod
    def _resolve_target(target: str) -> str:
        # Absolute targets are relative to the package root, others to xl/.
        if target.startswith("/"):
            return posixpath.normpath(target.lstrip("/"))
        return posixpath.normpath(posixpath.join("xl", target))

    def fallback_sheets(self, unpacked: Path) -> List[Tuple[str, Path]]:
        """Return every worksheet part in natural filename order."""
        directory = unpacked / "xl" / "worksheets"
        if not directory.is_dir():
            return []
        parts = sorted((p for p in directory.glob("*.xml") if p.is_file()), key=lambda p: natural_sort_key(p.name))
        return [(p.stem, p) for p in parts]
