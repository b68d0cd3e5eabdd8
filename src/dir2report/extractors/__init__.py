from .base import ContentExtractor
from .dispatcher import ExtractorDispatcher
from .docx_extractor import DocxExtractor
from .legacy_office import LegacyOfficeExtractor
from .pdf_extractor import PdfExtractor, find_pdftotext
from .plain_text import PlainTextExtractor
from .truncation import SHORT_TRUNCATION_NOTE, TRUNCATION_NOTE, truncate_text
from .xlsx_extractor import XlsxExtractor

__all__ = [
    "ContentExtractor",
    "DocxExtractor",
    "ExtractorDispatcher",
    "LegacyOfficeExtractor",
    "PdfExtractor",
    "PlainTextExtractor",
    "SHORT_TRUNCATION_NOTE",
    "TRUNCATION_NOTE",
    "XlsxExtractor",
    "find_pdftotext",
    "truncate_text",
]
