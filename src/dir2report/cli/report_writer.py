"""Report output for the dir2report CLI.

Reports saved to a file are UTF-8 with a leading byte-order mark, so that editors
on every platform recognize the encoding; reports written to stdout are plain UTF-8.
"""

import codecs
import errno
import sys
import types
from pathlib import Path
from typing import BinaryIO, Optional, Type, cast

from dir2report.types import PathType


class ReportWriter:
    """Write report text as UTF-8 to a file or to stdout.

    Attributes:
        path (Optional[Path]): Output file, or None for stdout.
        bom (bool): Whether a file gets a UTF-8 byte-order mark before the first write.

    Example:
        >>> with ReportWriter("report.md") as writer:  # doctest: +SKIP
        ...     writer.write("# Directory report: /data\\n")
    """

    def __init__(self, path: Optional[PathType] = None, bom: bool = True) -> None:
        """Open the output.

        Args:
            path: File to create or overwrite. None writes to stdout.
            bom: Prefix a file with the UTF-8 byte-order mark. Ignored for stdout.

        Raises:
            OSError: If the file cannot be opened.
        """
        self.path = Path(path) if path is not None else None
        self.bom = bom
        self._closed = False
        self._bom_pending = bom and self.path is not None

        if self.path is None:
            self._stream = cast(BinaryIO, getattr(sys.stdout, "buffer", None) or sys.stdout)
            self._owned = False
        else:
            self._stream = self.path.open("wb")
            self._owned = True

    def write(self, text: str) -> None:
        """Encode and write text.

        Raises:
            ValueError: If the writer has been closed.
            BrokenPipeError: If stdout was closed by the reading end.
            OSError: If an I/O error occurs.
        """
        if self._closed:
            raise ValueError("Cannot write to closed ReportWriter")

        data = text.encode("utf-8")
        if self._bom_pending:
            data = codecs.BOM_UTF8 + data
            self._bom_pending = False
        self._stream.write(data)

    def close(self) -> None:
        """Flush the output and close it if this writer opened it."""
        if self._closed:
            return
        self._closed = True

        try:
            self._stream.flush()
            if self._owned:
                self._stream.close()
        except OSError as e:
            if e.errno != errno.EPIPE:
                raise

    def __enter__(self) -> "ReportWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # An exception from the with block takes precedence.
            if exc_type is None:
                raise
