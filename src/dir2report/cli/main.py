"""Command-line interface for dir2report.

This module provides the ``dir2report`` command: it parses arguments into a
ReportConfig, generates one report and writes it to stdout or to a file.

Exit Codes:
    0: Successful completion (warnings, if any, are printed to stderr)
    1: Fatal error, e.g. the directory does not exist
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe, e.g. when piping to `head`

Example:
    # Basic usage
    $ dir2report /path/to/dir

    # Save the report and print counts
    $ dir2report /path/to/dir -o report.md -s stderr
"""

import logging
import os
import sys
from typing import List, Optional

from dir2report.cli.argparser import build_config, create_parser, validate_args
from dir2report.cli.report_writer import ReportWriter
from dir2report.dir2report import ReportResult, generate_report
from dir2report.exceptions import TokenizerNotAvailableError
from dir2report.token_counter import TokenCounter

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr: warnings by default, info with -v, debug with -vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def format_summary(result: ReportResult, counter: TokenCounter) -> str:
    """Format the summary counts of a report.

    Example:
        >>> counter = TokenCounter()
        >>> _ = counter.count("# Directory report: /data\\n")
        >>> print(format_summary(ReportResult("", file_count=2, directory_count=3), counter))
        Directories: 3
        Files: 2
        Symlinks: 0
        Lines: 1
        Characters: 26
    """
    summary = [
        f"Directories: {result.directory_count}",
        f"Files: {result.file_count}",
        f"Symlinks: {result.symlink_count}",
        f"Lines: {counter.total_lines}",
        f"Characters: {counter.total_characters}",
    ]
    if counter.total_tokens is not None:
        summary.insert(4, f"Tokens: {counter.total_tokens}")
    return "\n".join(summary)


def _silence_stdout() -> None:
    # Python flushes stdout again at exit; point it at devnull so that flush cannot fail.
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        pass


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the dir2report command-line interface.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Exit codes:
        0: Successful completion
        1: Fatal error
        2: Command-line syntax error
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        validate_args(args)
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        counter = TokenCounter(model=args.tokenizer)

        result = generate_report(config)
        if not result.ok:
            print(f"Error: {result.error}", file=sys.stderr)
            sys.exit(1)
        if result.warning:
            print(f"Warning: {result.warning}", file=sys.stderr)

        counter.count(result.text)
        with ReportWriter(args.output, bom=not args.no_bom) as writer:
            writer.write(result.text)
            if args.summary == "file":
                writer.write("\n" + format_summary(result, counter) + "\n")

        if args.summary == "stdout":
            print(format_summary(result, counter))
        elif args.summary == "stderr":
            print(format_summary(result, counter), file=sys.stderr)

    except TokenizerNotAvailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("To enable token counting, install dir2report with the 'token_counting' extra:", file=sys.stderr)
        print('    pip install "dir2report[token_counting]"', file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(130)
    except BrokenPipeError:
        _silence_stdout()
        sys.exit(141)
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
