"""Metadata for a file selected for content extraction."""

from dataclasses import dataclass
from pathlib import Path


def extension_of(name: str) -> str:
    """Return the lowercase last extension of a file name, including the dot.

    Only the last suffix counts, and a leading dot does not make a name
    extension-less, so dot-files keep their whole name as extension.

    Example:
        >>> extension_of("Report.DOCX")
        '.docx'
        >>> extension_of("archive.tar.gz")
        '.gz'
        >>> extension_of(".gitignore")
        '.gitignore'
        >>> extension_of("Makefile")
        ''
    """
    _, dot, suffix = name.rpartition(".")
    if not dot or not suffix:
        return ""
    return f".{suffix.lower()}"


@dataclass(frozen=True)
class FileEntry:
    """A regular file found during the scan.

    Entries are created transiently while a report is built and are not retained
    afterwards.

    Attributes:
        path: Absolute path to the file.
        relative_path: Path relative to the scanned root, with native separators.
        size: Size in bytes at scan time.
    """

    path: Path
    relative_path: str
    size: int

    @property
    def extension(self) -> str:
        """Lowercase extension including the leading dot, or an empty string."""
        return extension_of(self.path.name)
