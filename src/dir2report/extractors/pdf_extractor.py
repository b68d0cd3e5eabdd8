"""Text extraction from PDF files through Poppler's ``pdftotext``."""

import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from dir2report.exceptions import ExternalToolError, ExtractionError
from dir2report.tools.tool_runner import SubprocessToolRunner, ToolRunner
from dir2report.types import PathType

from .base import ContentExtractor

logger = logging.getLogger(__name__)

PDFTOTEXT_ARGS = ["-layout", "-enc", "UTF-8"]


def application_dir() -> Path:
    """Return the directory the running program was started from."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()


def find_pdftotext(app_dir: Optional[PathType] = None, windows: Optional[bool] = None) -> Optional[str]:
    """Locate the pdftotext executable.

    Candidates are checked in order: the application directory, its
    ``tools/poppler`` and ``poppler`` subdirectories, and finally the search path.

    Args:
        app_dir: Directory to search first. Defaults to :func:`application_dir`.
        windows: Whether to look for ``pdftotext.exe``. Defaults to the current platform.

    Returns:
        Path of the executable, or None if it cannot be found.
    """
    windows = sys.platform == "win32" if windows is None else windows
    executable = "pdftotext.exe" if windows else "pdftotext"
    base = Path(app_dir) if app_dir is not None else application_dir()
    for candidate in (base / executable, base / "tools" / "poppler" / executable, base / "poppler" / executable):
        if candidate.is_file():
            return str(candidate)
    return shutil.which("pdftotext")


class PdfExtractor(ContentExtractor):
    """Extract layout-preserving text from PDF files.

    Output is requested as UTF-8 on standard output and decoded leniently. The
    executable is located once, on first use.

    Attributes:
        runner (Optional[ToolRunner]): Runner for pdftotext; located lazily when None.
        app_dir (Optional[PathType]): Directory searched first for the executable.
    """

    def __init__(self, runner: Optional[ToolRunner] = None, app_dir: Optional[PathType] = None) -> None:
        self.runner = runner
        self.app_dir = app_dir

    def _get_runner(self) -> ToolRunner:
        if self.runner is None:
            executable = find_pdftotext(self.app_dir)
            if executable is None:
                raise ExtractionError("pdftotext not found; install Poppler utilities to extract PDF text")
            logger.debug("Using pdftotext at %s", executable)
            self.runner = SubprocessToolRunner(executable, name="pdftotext")
        return self.runner

    def build_args(self, path: PathType) -> List[str]:
        """Build the pdftotext argument list.

        Example:
            >>> PdfExtractor().build_args("manual.pdf")
            ['-layout', '-enc', 'UTF-8', 'manual.pdf', '-']
        """
        return PDFTOTEXT_ARGS + [str(path), "-"]

    def extract(self, path: Path) -> str:
        """Run pdftotext on a file.

        Raises:
            ExtractionError: If pdftotext is unavailable, cannot be run, or fails.
        """
        runner = self._get_runner()
        try:
            result = runner.invoke(self.build_args(path))
        except ExternalToolError as e:
            raise ExtractionError(str(e), str(path)) from e

        if result.exit_code != 0:
            detail = result.stderr.decode("utf-8", errors="replace").strip()
            message = f"pdftotext exited with status {result.exit_code}"
            raise ExtractionError(f"{message}: {detail}" if detail else message, str(path))
        return result.stdout.decode("utf-8", errors="replace")
