"""Markdown output strategy.

File blocks are wrapped in fenced code blocks whose backtick run is computed per
block, so backticks inside a file can never close the fence early.
"""

import re
from typing import List, Optional, Sequence

from .base_strategy import OutputStrategy

_BACKTICK_RUN = re.compile(r"`+")

TREE_HEADER = "## 1. Directory and file tree"
CONTENTS_HEADER = "## 2. File contents (filtered)"


def fence_length(payload: str) -> int:
    """Return the number of backticks needed to fence a payload safely.

    The result is one more than the longest run of backticks anywhere in the
    payload, and never less than three.

    Example:
        >>> fence_length("no backticks here")
        3
        >>> fence_length("x = ```python```")
        4
        >>> fence_length("a ````` b")
        6
    """
    longest = max((len(run) for run in _BACKTICK_RUN.findall(payload)), default=0)
    return max(3, longest + 1)


def begin_marker(relative_path: str, size: int) -> str:
    """Return the line that opens a file block.

    Example:
        >>> begin_marker("src/app.py", 120)
        '----- BEGIN FILE: src/app.py [120 bytes] ----'
    """
    return f"----- BEGIN FILE: {relative_path} [{size} bytes] ----"


def end_marker(relative_path: str) -> str:
    """Return the line that closes a file block.

    Example:
        >>> end_marker("src/app.py")
        '----- END FILE:   src/app.py ----'
    """
    return f"----- END FILE:   {relative_path} ----"


class MarkdownOutputStrategy(OutputStrategy):
    """Render reports as Markdown.

    Example:
        >>> strategy = MarkdownOutputStrategy()
        >>> print("\\n".join(strategy.format_file("a.txt", 5, "hello\\n")))
        ```text
        ----- BEGIN FILE: a.txt [5 bytes] ----
        hello
        ----- END FILE:   a.txt ----
        ```
        <BLANKLINE>
        >>> strategy.format_file("b.bin", 3, error="Permission denied")[2]
        '[READ ERROR: Permission denied]'
    """

    def format_title(self, root_path: str) -> List[str]:
        return [f"# Directory report: {root_path}"]

    def format_tree_section(self, tree_lines: Sequence[str]) -> List[str]:
        lines = [TREE_HEADER]
        if tree_lines:
            fence = "`" * fence_length("\n".join(tree_lines))
            lines += [f"{fence}text", *tree_lines, fence]
        lines.append("")
        return lines

    def format_contents_header(self, max_file_bytes: int) -> List[str]:
        return [
            CONTENTS_HEADER,
            f"*(only files with included extensions and at most {max_file_bytes} bytes)*",
            "",
        ]

    def format_file(
        self, relative_path: str, size: int, content: Optional[str] = None, error: Optional[str] = None
    ) -> List[str]:
        """Format one file block.

        Trailing line breaks of the content are dropped so the end marker always
        follows on the next line.
        """
        body = f"[READ ERROR: {error}]" if error is not None else (content or "").rstrip("\r\n")
        begin, end = begin_marker(relative_path, size), end_marker(relative_path)
        fence = "`" * fence_length("\n".join((begin, body, end)))
        return [f"{fence}text", begin, body, end, fence, ""]
