"""Pluggable capability for invoking external programs.

The engine only depends on the ToolRunner interface, so tests (or callers that
want a pure in-process behavior) can substitute runners that never spawn a
process.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from collections import namedtuple
from typing import Mapping, Optional, Sequence

from dir2report.exceptions import ExternalToolError, ToolNotFoundError
from dir2report.types import PathType

logger = logging.getLogger(__name__)

ToolResult = namedtuple("ToolResult", ["exit_code", "stdout", "stderr"], defaults=[b""])


class ToolRunner(ABC):
    """Abstract capability that runs one external program with arguments.

    Attributes:
        name (str): Human-readable name of the tool, used in messages.

    Example:
        >>> class EchoRunner(ToolRunner):
        ...     name = "echo"
        ...     def invoke(self, args, cwd=None):
        ...         return ToolResult(0, " ".join(args).encode())
        >>> EchoRunner().invoke(["a", "b"]).stdout
        b'a b'
    """

    name: str = "tool"

    @abstractmethod
    def invoke(self, args: Sequence[str], cwd: Optional[PathType] = None) -> ToolResult:
        """Run the tool and wait for it to exit.

        Args:
            args: Arguments passed after the executable.
            cwd: Working directory for the process, if any.

        Returns:
            ToolResult with the exit code and the raw bytes written to stdout/stderr.

        Raises:
            ToolNotFoundError: If the tool cannot be started.
        """
        pass


class SubprocessToolRunner(ToolRunner):
    """ToolRunner backed by :func:`subprocess.run`.

    The call blocks until the process exits. No timeout is applied unless one is
    given; a timeout expiry is reported as an ExternalToolError.

    Attributes:
        executable (str): Program to run (a path or a name resolved through PATH).
        name (str): Display name, defaults to the executable.
        env (Optional[Mapping[str, str]]): Environment override for the process.
        timeout (Optional[float]): Seconds to wait before giving up.
    """

    def __init__(
        self,
        executable: PathType,
        name: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.executable = str(executable)
        self.name = name or self.executable
        self.env = env
        self.timeout = timeout

    def invoke(self, args: Sequence[str], cwd: Optional[PathType] = None) -> ToolResult:
        command = [self.executable, *args]
        logger.debug("Running %s", command)
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                env=self.env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(self.name, f"executable not found ({e})") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(self.name, f"timed out after {self.timeout} seconds") from e
        except OSError as e:
            raise ToolNotFoundError(self.name, f"failed to start ({e})") from e

        return ToolResult(completed.returncode, completed.stdout or b"", completed.stderr or b"")
