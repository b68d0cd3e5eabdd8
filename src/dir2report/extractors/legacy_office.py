"""Placeholder for legacy binary Office formats."""

from pathlib import Path

from dir2report.file_system_tree.file_entry import extension_of

from .base import ContentExtractor

LEGACY_FORMAT_MESSAGES = {
    ".doc": "[Legacy Word format (.doc) is not supported for text extraction. Save the file as .docx to include its text.]",
    ".xls": "[Legacy Excel format (.xls) is not supported for text extraction. Save the file as .xlsx to include its text.]",
}


class LegacyOfficeExtractor(ContentExtractor):
    """Return a fixed advisory message instead of the content of .doc/.xls files.

    This is not an error: the message takes the place of the file's text.

    Example:
        >>> LegacyOfficeExtractor().extract(Path("old.doc")).startswith("[Legacy Word format")
        True
    """

    def extract(self, path: Path) -> str:
        extension = extension_of(path.name)
        return LEGACY_FORMAT_MESSAGES.get(
            extension, f"[Legacy binary format ({extension}) is not supported for text extraction.]"
        )
