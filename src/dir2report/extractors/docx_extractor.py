"""Text extraction from Word Open XML (.docx) documents."""

import logging
from pathlib import Path
from typing import IO, List, Optional
from xml.etree.ElementTree import ParseError

from dir2report.exceptions import ExtractionError
from dir2report.tools.archive_expander import ArchiveExpander, expanded_archive

from .base import ContentExtractor
from .xml_utils import iter_events

logger = logging.getLogger(__name__)

DOCUMENT_PART = ("word", "document.xml")


def parse_document_xml(source: IO[bytes]) -> str:
    """Extract the text of a ``word/document.xml`` stream.

    Elements are matched by local name, so namespace prefixes do not matter:

    - ``t`` contributes its text,
    - ``tab`` contributes a tab character, except inside ``tabs`` where it is a
      tab-stop definition,
    - ``br`` and ``cr`` contribute a newline,
    - the end of every ``p`` contributes a newline.

    Args:
        source: Binary stream positioned at the start of the XML document.

    Returns:
        The document text, one line per paragraph.

    Raises:
        xml.etree.ElementTree.ParseError: If the XML is malformed.

    Example:
        >>> import io
        >>> xml = (b'<w:document xmlns:w="urn:w"><w:body>'
        ...        b'<w:p><w:r><w:t>Hello</w:t><w:tab/><w:t>World</w:t></w:r></w:p>'
        ...        b'<w:p><w:r><w:t>Second</w:t></w:r></w:p>'
        ...        b'</w:body></w:document>')
        >>> parse_document_xml(io.BytesIO(xml))
        'Hello\\tWorld\\nSecond\\n'
    """
    parts: List[str] = []
    stack: List[str] = []
    for event, elem, name in iter_events(source):
        if event == "start":
            stack.append(name)
            continue

        stack.pop()
        if name == "t":
            parts.append(elem.text or "")
        elif name == "tab":
            if not stack or stack[-1] != "tabs":
                parts.append("\t")
        elif name in ("br", "cr"):
            parts.append("\n")
        elif name == "p":
            parts.append("\n")
            elem.clear()
    return "".join(parts)


class DocxExtractor(ContentExtractor):
    """Extract paragraph text from .docx files.

    The document is expanded into a temporary directory and only
    ``word/document.xml`` is parsed; headers, footers, comments and notes are not
    part of the output.

    Attributes:
        expander (Optional[ArchiveExpander]): Expander for the zip container.
    """

    def __init__(self, expander: Optional[ArchiveExpander] = None) -> None:
        self.expander = expander

    def extract(self, path: Path) -> str:
        with expanded_archive(path, self.expander) as unpacked:
            document = unpacked.joinpath(*DOCUMENT_PART)
            if not document.is_file():
                raise ExtractionError("word/document.xml not found; not a Word document", str(path))
            try:
                with open(document, "rb") as f:
                    return parse_document_xml(f)
            except ParseError as e:
                raise ExtractionError(f"Malformed XML in word/document.xml: {e}", str(path)) from e
