"""Routing of files to the extractor for their format."""

import logging
from typing import Dict, Optional

from dir2report.encoding.text_decoder import TextDecoder
from dir2report.file_system_tree.file_entry import FileEntry
from dir2report.tools.archive_expander import ArchiveExpander

from .base import ContentExtractor
from .docx_extractor import DocxExtractor
from .legacy_office import LegacyOfficeExtractor
from .pdf_extractor import PdfExtractor
from .plain_text import PlainTextExtractor
from .truncation import truncate_text
from .xlsx_extractor import XlsxExtractor

logger = logging.getLogger(__name__)


class ExtractorDispatcher:
    """Select an extractor by lowercase file extension and cap its output.

    ``.doc``/``.xls`` get a placeholder, ``.docx`` and ``.xlsx``/``.xlsm`` are read
    from their zip containers, ``.pdf`` goes through pdftotext and every other
    extension is treated as plain text. Whatever the extractor, the returned text
    never exceeds ``max_output_chars`` (0 for unlimited).

    Attributes:
        max_output_chars (int): Character cap applied to every extracted document.
        default_extractor (ContentExtractor): Extractor for extensions without a specific one.

    Example:
        >>> from pathlib import Path
        >>> dispatcher = ExtractorDispatcher(max_output_chars=100)
        >>> type(dispatcher.extractor_for(".XLSM")).__name__
        'XlsxExtractor'
        >>> type(dispatcher.extractor_for(".py")).__name__
        'PlainTextExtractor'
        >>> dispatcher.extract(FileEntry(Path("old.xls"), "old.xls", 0)).startswith("[Legacy Excel")
        True
    """

    def __init__(
        self,
        decoder: Optional[TextDecoder] = None,
        archive_expander: Optional[ArchiveExpander] = None,
        pdf_extractor: Optional[ContentExtractor] = None,
        max_output_chars: int = 0,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            decoder: Decoder for plain-text files. Defaults to a TextDecoder in auto mode.
            archive_expander: Expander for Office Open XML containers. Defaults to zipfile.
            pdf_extractor: Extractor for PDF files. Defaults to a PdfExtractor.
            max_output_chars: Character cap per document, 0 for unlimited.
        """
        self.max_output_chars = max_output_chars
        self.default_extractor: ContentExtractor = PlainTextExtractor(decoder)

        legacy = LegacyOfficeExtractor()
        xlsx = XlsxExtractor(archive_expander, max_output_chars)
        self._extractors: Dict[str, ContentExtractor] = {
            ".doc": legacy,
            ".xls": legacy,
            ".docx": DocxExtractor(archive_expander),
            ".xlsx": xlsx,
            ".xlsm": xlsx,
            ".pdf": pdf_extractor or PdfExtractor(),
        }

    def extractor_for(self, extension: str) -> ContentExtractor:
        """Return the extractor registered for an extension (case-insensitive)."""
        return self._extractors.get(extension.lower(), self.default_extractor)

    def extract(self, entry: FileEntry) -> str:
        """Extract and cap the text of a file.

        Raises:
            ExtractionError: If the file's content cannot be extracted.
        """
        extractor = self.extractor_for(entry.extension)
        logger.debug("Extracting %s with %s", entry.relative_path, type(extractor).__name__)
        return truncate_text(extractor.extract(entry.path), self.max_output_chars)
