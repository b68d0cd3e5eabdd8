"""Directory listing through the operating system's native ``tree`` utility."""

import locale
import logging
import os
import sys
from typing import Iterable, List, Optional

from dir2report.exceptions import ExternalToolError
from dir2report.tools.tool_runner import SubprocessToolRunner, ToolRunner
from dir2report.types import PathType

logger = logging.getLogger(__name__)


def console_encoding(windows: bool) -> str:
    """Return the code page native console tools write their output in.

    On Windows this is the OEM code page (the ``oem`` codec); elsewhere the locale
    encoding is used.
    """
    return "oem" if windows else locale.getencoding()


class NativeTreeLister:
    """Run the native ``tree`` utility and return its output as lines.

    On Windows the listing is produced by ``cmd /c chcp 65001>nul & tree <root> /F /A``;
    on other platforms by ``tree -a --noreport --charset utf-8 <root>``, which also
    receives the excluded directory names through ``-I`` so the listing honours them.

    The raw output is decoded with the console code page rather than UTF-8, since
    native shells often emit it regardless of the requested mode. Every failure mode
    (tool missing, non-zero exit, undecodable or empty output) raises
    ExternalToolError so the caller can fall back to the internal renderer.

    Attributes:
        windows (bool): Whether Windows command syntax is used.
        runner (ToolRunner): Runner that executes the listing command.
        output_encoding (str): Codec used to decode the raw output.

    Example:
        >>> from dir2report.tools.tool_runner import ToolResult, ToolRunner
        >>> class FakeTree(ToolRunner):
        ...     name = "tree"
        ...     def invoke(self, args, cwd=None):
        ...         return ToolResult(0, b"/data\\n+-- a.txt\\n")
        >>> NativeTreeLister(FakeTree(), output_encoding="ascii", windows=False).list_tree("/data")
        ['/data', '+-- a.txt']
    """

    def __init__(
        self,
        runner: Optional[ToolRunner] = None,
        output_encoding: Optional[str] = None,
        windows: Optional[bool] = None,
    ) -> None:
        self.windows = sys.platform == "win32" if windows is None else windows
        self.runner = runner or self._default_runner()
        self.output_encoding = output_encoding or console_encoding(self.windows)

    def _default_runner(self) -> ToolRunner:
        if self.windows:
            return SubprocessToolRunner(os.environ.get("COMSPEC", "cmd.exe"), name="tree")
        return SubprocessToolRunner("tree", name="tree")

    def build_args(self, root: PathType, exclude_dir_names: Iterable[str] = ()) -> List[str]:
        """Build the argument list for the runner.

        Example:
            >>> NativeTreeLister(windows=False).build_args("/src", ["build", ".git"])
            ['-a', '--noreport', '--charset', 'utf-8', '-I', '.git|build', '--ignore-case', '/src']
        """
        root = os.fspath(root)
        if self.windows:
            # Separate tokens keep cmd's /c quote stripping away from the root path.
            return ["/d", "/c", "chcp", "65001>nul", "&", "tree", root, "/F", "/A"]

        args = ["-a", "--noreport", "--charset", "utf-8"]
        names = sorted(set(exclude_dir_names))
        if names:
            args += ["-I", "|".join(names), "--ignore-case"]
        args.append(root)
        return args

    def list_tree(self, root: PathType, exclude_dir_names: Iterable[str] = ()) -> List[str]:
        """List the directory tree below root.

        Args:
            root: Directory to list.
            exclude_dir_names: Directory names to hide, where the utility supports it.

        Returns:
            The output lines, stripped of leading and trailing blank lines.

        Raises:
            ExternalToolError: If the listing cannot be produced.
        """
        result = self.runner.invoke(self.build_args(root, exclude_dir_names))
        if result.exit_code != 0:
            raise ExternalToolError(self.runner.name, f"exited with status {result.exit_code}", result.exit_code)

        try:
            text = result.stdout.decode(self.output_encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug("Could not decode %s output as %s: %s", self.runner.name, self.output_encoding, e)
            text = ""

        text = text.strip("\r\n")
        if not text.strip():
            raise ExternalToolError(self.runner.name, "produced no output")
        return text.splitlines()
