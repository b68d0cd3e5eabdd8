"""Directory to Markdown report utilities.

This package walks a directory tree and produces a single Markdown report
combining a visual tree of the hierarchy with the decoded text of selected
files, suitable for pasting into a Large Language Model (LLM) context.
"""

from importlib.metadata import PackageNotFoundError, version

from dir2report.config import ReportConfig
from dir2report.dir2report import ReportGenerator, ReportResult, generate_report
from dir2report.encoding.no_bom_mode import NoBomTextMode

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dir2report")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "NoBomTextMode",
    "ReportConfig",
    "ReportGenerator",
    "ReportResult",
    "generate_report",
]
