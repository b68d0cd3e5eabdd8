"""Output strategy base class defining the interface for report rendering.

A report is assembled by the generator from four kinds of pieces, always in the
same order: a title, the tree section, the contents header and one block per
file. Strategies turn each piece into lines; the generator joins all lines with
``"\\n"`` so the report ends with exactly one newline.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence


class OutputStrategy(ABC):
    """Abstract base class for report formats.

    Every method returns a list of lines without line terminators. A trailing empty
    string in a list produces the blank line that separates it from the next section.

    Example:
        >>> class PlainStrategy(OutputStrategy):
        ...     def format_title(self, root_path):
        ...         return [f"Report for {root_path}"]
        ...     def format_tree_section(self, tree_lines):
        ...         return list(tree_lines) + [""]
        ...     def format_contents_header(self, max_file_bytes):
        ...         return []
        ...     def format_file(self, relative_path, size, content=None, error=None):
        ...         return [f"== {relative_path}", content if error is None else f"! {error}", ""]
        >>> PlainStrategy().format_file("a.txt", 5, "hello")
        ['== a.txt', 'hello', '']
    """

    @abstractmethod
    def format_title(self, root_path: str) -> List[str]:
        """Format the report title naming the scanned root."""
        pass

    @abstractmethod
    def format_tree_section(self, tree_lines: Sequence[str]) -> List[str]:
        """Format the tree section header and the tree lines.

        Args:
            tree_lines: Tree lines from the internal renderer or the native utility.
                May be empty, for instance when the root itself is excluded.
        """
        pass

    @abstractmethod
    def format_contents_header(self, max_file_bytes: int) -> List[str]:
        """Format the header and caption of the file contents section.

        Args:
            max_file_bytes: Size limit for extracted files, shown in the caption.
        """
        pass

    @abstractmethod
    def format_file(
        self, relative_path: str, size: int, content: Optional[str] = None, error: Optional[str] = None
    ) -> List[str]:
        """Format the block of one file.

        Exactly one of content and error is expected. When error is given it replaces
        the content as a read-error line.

        Args:
            relative_path: Path of the file relative to the root.
            size: File size in bytes.
            content: Extracted text.
            error: Reason the content could not be extracted.
        """
        pass
