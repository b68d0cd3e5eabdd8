"""Expansion of zip-based documents into private scratch directories.

Office Open XML documents (.docx, .xlsx, .xlsm) are zip archives. The
:func:`expanded_archive` context manager copies a document to a private
``.zip`` file, expands it with an ArchiveExpander, yields the expansion
directory, and removes every temporary file on exit, whatever happens inside
the ``with`` block.
"""

import logging
import shutil
import sys
import tempfile
import zipfile
import zlib
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from dir2report.exceptions import ExtractionError, ToolNotFoundError
from dir2report.tools.tool_runner import SubprocessToolRunner, ToolRunner
from dir2report.types import PathType

logger = logging.getLogger(__name__)


class ArchiveExpander(ABC):
    """Interface for expanding a zip archive into a directory."""

    @abstractmethod
    def expand(self, archive: Path, destination: Path) -> None:
        """Expand archive into destination (which already exists).

        Raises:
            ExtractionError: If the archive cannot be expanded.
        """
        pass


class ZipfileArchiveExpander(ArchiveExpander):
    """In-process expander using the standard library's zipfile module."""

    def expand(self, archive: Path, destination: Path) -> None:
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(destination)
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ExtractionError(f"Not a valid zip-based document: {e}", str(archive)) from e
        except (zlib.error, EOFError) as e:
            raise ExtractionError(f"Corrupt archive member: {e}", str(archive)) from e
        except (RuntimeError, NotImplementedError) as e:
            # zipfile signals encrypted members and unknown compression methods this way.
            raise ExtractionError(f"Unsupported archive member: {e}", str(archive)) from e
        except OSError as e:
            raise ExtractionError(f"Failed to expand archive: {e}", str(archive)) from e


class CommandArchiveExpander(ArchiveExpander):
    """Expander that delegates to a native utility.

    Windows uses PowerShell's ``Expand-Archive``; other platforms use ``unzip``.

    Attributes:
        windows (bool): Whether the PowerShell command line is used.
        runner (ToolRunner): Runner executing the utility.
    """

    def __init__(self, runner: Optional[ToolRunner] = None, windows: Optional[bool] = None) -> None:
        self.windows = sys.platform == "win32" if windows is None else windows
        if runner is None:
            if self.windows:
                runner = SubprocessToolRunner("powershell", name="Expand-Archive")
            else:
                runner = SubprocessToolRunner("unzip", name="unzip")
        self.runner = runner

    def build_args(self, archive: Path, destination: Path) -> list:
        """Build the argument list for the runner.

        Example:
            >>> CommandArchiveExpander(windows=False).build_args(Path("/t/source.zip"), Path("/t/out"))
            ['-q', '-o', '/t/source.zip', '-d', '/t/out']
        """
        if self.windows:
            source, target = (str(p).replace("'", "''") for p in (archive, destination))
            script = f"Expand-Archive -LiteralPath '{source}' -DestinationPath '{target}' -Force"
            return ["-NoProfile", "-NonInteractive", "-Command", script]
        return ["-q", "-o", str(archive), "-d", str(destination)]

    def expand(self, archive: Path, destination: Path) -> None:
        """Run the utility.

        Raises:
            ToolNotFoundError: If the utility cannot be started.
            ExtractionError: If the utility exits with a non-zero status.
        """
        result = self.runner.invoke(self.build_args(archive, destination))
        if result.exit_code != 0:
            detail = (result.stderr or result.stdout).decode("utf-8", errors="replace").strip()
            message = f"{self.runner.name} exited with status {result.exit_code}"
            if detail:
                message = f"{message}: {detail}"
            raise ExtractionError(message, str(archive))


class FallbackArchiveExpander(ArchiveExpander):
    """Try a primary expander and fall back when its tool is unavailable.

    Only ToolNotFoundError triggers the fallback. A tool that runs and fails has
    given its verdict on the archive, so that failure fails the current file.
    """

    def __init__(self, primary: ArchiveExpander, fallback: Optional[ArchiveExpander] = None) -> None:
        self.primary = primary
        self.fallback = fallback or ZipfileArchiveExpander()

    def expand(self, archive: Path, destination: Path) -> None:
        try:
            self.primary.expand(archive, destination)
        except ToolNotFoundError as e:
            logger.info("%s; expanding in-process instead", e)
            self.fallback.expand(archive, destination)


@contextmanager
def expanded_archive(source: PathType, expander: Optional[ArchiveExpander] = None) -> Iterator[Path]:
    """Expand a zip-based document into a private temporary directory.

    The document is first copied to ``source.zip`` in a fresh temporary directory,
    since some expansion tools only recognise archives by their extension, and is
    then expanded next to it. The whole scratch directory is removed when the
    context exits, including on errors.

    Args:
        source: Path to the document.
        expander: Expander to use. Defaults to ZipfileArchiveExpander.

    Yields:
        The directory holding the expanded archive members.

    Raises:
        ExtractionError: If the document cannot be copied or expanded.

    Example:
        >>> with expanded_archive("report.docx") as unpacked:  # doctest: +SKIP
        ...     xml = (unpacked / "word" / "document.xml").read_bytes()
    """
    expander = expander or ZipfileArchiveExpander()
    with tempfile.TemporaryDirectory(prefix="dir2report-") as scratch:
        scratch_path = Path(scratch)
        archive = scratch_path / "source.zip"
        destination = scratch_path / "unpacked"
        destination.mkdir()
        try:
            shutil.copyfile(source, archive)
        except OSError as e:
            raise ExtractionError(f"Failed to copy document for expansion: {e}", str(source)) from e
        expander.expand(archive, destination)
        yield destination
