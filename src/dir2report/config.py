"""Immutable configuration for a single report request."""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from humanfriendly import InvalidSize, parse_size

from dir2report.encoding.no_bom_mode import NoBomTextMode
from dir2report.extractors.truncation import SHORT_TRUNCATION_NOTE
from dir2report.file_system_tree.file_entry import FileEntry
from dir2report.types import PathType

DEFAULT_INCLUDE_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        # Scripts
        ".ps1",
        ".psm1",
        ".psd1",
        ".bat",
        ".cmd",
        # Documents/Config
        ".txt",
        ".md",
        ".json",
        ".xml",
        ".yaml",
        ".yml",
        ".csv",
        ".ini",
        ".config",
        # Source code
        ".cs",
        ".vb",
        ".fs",
        ".cpp",
        ".hpp",
        ".c",
        ".h",
        ".py",
        ".rb",
        ".go",
        ".ts",
        ".tsx",
        ".js",
        ".jsx",
        ".html",
        ".css",
        # Office and PDF
        ".doc",
        ".docx",
        ".xls",
        ".xlsx",
        ".xlsm",
        ".pdf",
    }
)

DEFAULT_EXCLUDE_DIR_NAMES: FrozenSet[str] = frozenset(
    {
        ".git",
        "node_modules",
        "bin",
        "obj",
        ".vs",
        ".vscode",
        ".idea",
        ".venv",
        "venv",
        "dist",
        "build",
        ".terraform",
        ".cache",
        ".pytest_cache",
    }
)

DEFAULT_MAX_FILE_BYTES = 1024 * 1024
DEFAULT_MAX_OUTPUT_CHARS = 1024 * 1024


def parse_file_size(size: Union[str, int]) -> int:
    """Parse a human-readable file size to bytes.

    Args:
        size: Size such as ``"1MiB"``, ``"500KB"``, ``"2.5K"``, ``"1024"`` or an int.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the size is negative or not a valid size format.

    Example:
        >>> parse_file_size("1KiB")
        1024
        >>> parse_file_size("1MB")
        1000000
        >>> parse_file_size(42)
        42
    """
    if isinstance(size, bool) or not isinstance(size, (int, str)):
        raise ValueError(f"Size must be a string or int, got {type(size).__name__}")
    if isinstance(size, str):
        try:
            size = int(parse_size(size))
        except InvalidSize as e:
            raise ValueError(f"Invalid size format '{size}': {e}") from e
    if size < 0:
        raise ValueError("Size cannot be negative")
    return size


def normalize_extensions(extensions: Iterable[str]) -> FrozenSet[str]:
    """Normalize extensions to lowercase with a leading dot, dropping blanks.

    Example:
        >>> sorted(normalize_extensions(["PY", ".Txt", " md ", ""]))
        ['.md', '.py', '.txt']
    """
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        normalized.add(ext)
    return frozenset(normalized)


def normalize_dir_names(names: Iterable[str]) -> FrozenSet[str]:
    """Normalize directory names to lowercase, dropping blanks.

    Example:
        >>> sorted(normalize_dir_names(["Node_Modules", " .git ", ""]))
        ['.git', 'node_modules']
    """
    return frozenset(name.strip().lower() for name in names if name.strip())


@dataclass(frozen=True)
class ReportConfig:
    """Configuration for one report request.

    Instances are immutable and are normally created once per call to
    :meth:`dir2report.dir2report.ReportGenerator.generate`. Collections are
    normalized on construction; passing ``None`` (or nothing) for the extension
    or directory-name sets selects the defaults.

    Attributes:
        root_path: Directory to scan, made absolute and normalized. An empty value is
            kept empty so the generator can report it as a fatal error.
        include_extensions: Lowercase extensions (with leading dot) whose content is extracted.
        exclude_dir_names: Lowercase directory names excluded at any depth.
        max_file_bytes: Files larger than this are not extracted. Accepts human-readable sizes.
        max_output_chars: Character cap per extracted document, 0 for unlimited. A non-zero cap
            must leave room for the short truncation note.
        use_external_tree: Try the native tree utility before the internal renderer.
        tree_only: Produce only the tree section.
        no_bom_text_mode: Decoding policy for text without a byte-order mark.
        legacy_encoding: Codec for the legacy fallback; None selects the platform default.
        ignore_patterns: Additional gitignore-style patterns, relative to the root.
        use_external_unzip: Try the native archive utility before the in-process expander.

    Example:
        >>> config = ReportConfig("/tmp/project", include_extensions=["py"], max_file_bytes="2KiB")
        >>> sorted(config.include_extensions)
        ['.py']
        >>> config.max_file_bytes
        2048
        >>> ".git" in config.exclude_dir_names
        True
    """

    root_path: PathType
    include_extensions: Optional[Iterable[str]] = None
    exclude_dir_names: Optional[Iterable[str]] = None
    max_file_bytes: Union[int, str] = DEFAULT_MAX_FILE_BYTES
    max_output_chars: int = DEFAULT_MAX_OUTPUT_CHARS
    use_external_tree: bool = False
    tree_only: bool = False
    no_bom_text_mode: NoBomTextMode = NoBomTextMode.AUTO_UTF8_THEN_LOCALE
    legacy_encoding: Optional[str] = None
    ignore_patterns: Tuple[str, ...] = field(default_factory=tuple)
    use_external_unzip: bool = False

    def __post_init__(self) -> None:
        root = os.fspath(self.root_path).strip()
        object.__setattr__(self, "root_path", os.path.normpath(os.path.abspath(root)) if root else "")

        include = normalize_extensions(self.include_extensions or ())
        object.__setattr__(self, "include_extensions", include or DEFAULT_INCLUDE_EXTENSIONS)

        exclude = self.exclude_dir_names
        object.__setattr__(
            self, "exclude_dir_names", DEFAULT_EXCLUDE_DIR_NAMES if exclude is None else normalize_dir_names(exclude)
        )

        object.__setattr__(self, "max_file_bytes", parse_file_size(self.max_file_bytes))
        if self.max_output_chars < 0:
            raise ValueError("max_output_chars cannot be negative")
        if 0 < self.max_output_chars < len(SHORT_TRUNCATION_NOTE):
            raise ValueError(
                f"max_output_chars must be 0 (unlimited) or at least {len(SHORT_TRUNCATION_NOTE)}, "
                "the length of the shortest truncation note"
            )

        object.__setattr__(self, "no_bom_text_mode", NoBomTextMode(self.no_bom_text_mode))
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns))

    def accepts(self, entry: FileEntry) -> bool:
        """Check whether a file's content should be extracted: size first, then extension.

        Example:
            >>> from pathlib import Path
            >>> config = ReportConfig("/tmp", include_extensions=[".txt"], max_file_bytes=10)
            >>> config.accepts(FileEntry(Path("/tmp/a.TXT"), "a.TXT", 5))
            True
            >>> config.accepts(FileEntry(Path("/tmp/b.txt"), "b.txt", 11))
            False
            >>> config.accepts(FileEntry(Path("/tmp/c.py"), "c.py", 5))
            False
        """
        if entry.size > self.max_file_bytes:
            return False
        return entry.extension in self.include_extensions
