"""Bridges to optional external processes: tree listing, archive expansion and process running."""

from .archive_expander import (
    ArchiveExpander,
    CommandArchiveExpander,
    FallbackArchiveExpander,
    ZipfileArchiveExpander,
    expanded_archive,
)
from .native_tree import NativeTreeLister
from .tool_runner import SubprocessToolRunner, ToolResult, ToolRunner

__all__ = [
    "ArchiveExpander",
    "CommandArchiveExpander",
    "FallbackArchiveExpander",
    "NativeTreeLister",
    "SubprocessToolRunner",
    "ToolResult",
    "ToolRunner",
    "ZipfileArchiveExpander",
    "expanded_archive",
]
