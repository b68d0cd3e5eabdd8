from typing import Optional


class ExtractionError(Exception):
    """
    Exception raised when the text of a single file cannot be extracted.

    Extraction errors are isolated to the file that caused them: the report generator
    catches them and renders a ``[READ ERROR: ...]`` line in place of that file's content
    while every other file is processed normally.

    Attributes:
        file_path (Optional[str]): Path to the file that failed, when known.

    Example:
        >>> error = ExtractionError("word/document.xml not found in archive", "/tmp/a.docx")
        >>> str(error)
        'word/document.xml not found in archive'
        >>> error.file_path
        '/tmp/a.docx'
    """

    def __init__(self, message: str, file_path: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message (str): Human-readable reason the extraction failed.
            file_path (str, optional): Path to the file being extracted.
        """
        self.file_path = file_path
        super().__init__(message)


class ExternalToolError(Exception):
    """
    Exception raised when an external helper process fails.

    This covers a non-zero exit status, empty or undecodable output, and (through the
    ToolNotFoundError subclass) a process that could not be started at all.

    Attributes:
        tool (str): Name of the tool that failed.
        exit_code (Optional[int]): Exit status of the process, if it ran.

    Example:
        >>> error = ExternalToolError("tree", "exited with status 2", exit_code=2)
        >>> str(error)
        'tree: exited with status 2'
        >>> error.exit_code
        2
    """

    def __init__(self, tool: str, message: str, exit_code: Optional[int] = None) -> None:
        self.tool = tool
        self.exit_code = exit_code
        super().__init__(f"{tool}: {message}")


class ToolNotFoundError(ExternalToolError):
    """
    Exception raised when an external tool cannot be located or started.

    Example:
        >>> error = ToolNotFoundError("pdftotext", "executable not found")
        >>> isinstance(error, ExternalToolError)
        True
    """

    pass


class TokenizerNotAvailableError(Exception):
    """
    Exception raised when attempting to use token counting functionality without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but token counting
    functionality is requested. The tiktoken package is an optional dependency that must be
    explicitly installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        self.message = (
            f"{message} To enable token counting, install dir2report with the 'token_counting' "
            "extra: 'pip install dir2report[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass
