"""Command-line argument parsing for dir2report.

This module defines the command-line interface for dir2report, handling argument
parsing, validation and the mapping of options onto a ReportConfig.
"""

import argparse
import codecs
from pathlib import Path

from dir2report import __version__
from dir2report.config import (
    DEFAULT_EXCLUDE_DIR_NAMES,
    DEFAULT_MAX_FILE_BYTES,
    DEFAULT_MAX_OUTPUT_CHARS,
    ReportConfig,
    parse_file_size,
)
from dir2report.encoding.no_bom_mode import NoBomTextMode


def file_size(value: str) -> int:
    """argparse type for human-readable sizes such as ``512KB`` or ``1MiB``."""
    try:
        return parse_file_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def non_negative_int(value: str) -> int:
    """argparse type for integers that must not be negative."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with dir2report's options.
    """
    description = """
    dir2report: write a Markdown report of a directory's structure and file contents.

    The report has two sections: a tree of every non-excluded entry, and the text of
    every file whose extension is included and whose size is within the limit. Plain
    text is decoded with byte-order-mark detection and a UTF-8/legacy code page
    fallback; .docx, .xlsx/.xlsm and .pdf files contribute their extracted text.

    Excluded directory names (by default .git, node_modules, bin, obj, build, dist,
    virtual environments and editor folders) are skipped at any depth, in both sections.
    """

    epilog = """
    Examples:
      # Report on a project, written to stdout
      dir2report /path/to/project

      # Save to a file (UTF-8 with byte-order mark)
      dir2report -o report.md /path/to/project

      # Only the tree section, using the native tree utility when available
      dir2report -T --external-tree /path/to/project

      # Only Python and Markdown files up to 200 KB, documents capped at 20000 characters
      dir2report -I py -I md -m 200KB -c 20000 /path/to/project

      # Skip an extra directory and files matching gitignore-style patterns
      dir2report -x fixtures -i "*.min.js" -i "docs/generated/" /path/to/project

      # Decode files without a byte-order mark as Windows-1251
      dir2report --force-locale --legacy-encoding cp1251 /path/to/project

      # Print line, character and token counts to stderr
      dir2report -s stderr -t gpt-4 /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="dir2report",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dir2report {__version__}", help="Show the version and exit"
    )
    parser.add_argument(
        "directory",
        type=Path,
        help="The directory to report on. Paths in the report are relative to it.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, the report is written to stdout.",
    )
    parser.add_argument(
        "-x",
        "--exclude-dir",
        metavar="NAME",
        action="append",
        default=[],
        help="Directory name to exclude at any depth, case-insensitively (can be specified multiple times).",
    )
    parser.add_argument(
        "--no-default-excludes",
        action="store_true",
        help=f"Do not exclude the default directory names ({', '.join(sorted(DEFAULT_EXCLUDE_DIR_NAMES))}).",
    )
    parser.add_argument(
        "-I",
        "--include-ext",
        metavar="EXT",
        action="append",
        default=[],
        help=(
            "Extension whose file contents are included, with or without the leading dot "
            "(can be specified multiple times). Replaces the default extension list."
        ),
    )
    parser.add_argument(
        "-m",
        "--max-file-size",
        type=file_size,
        metavar="SIZE",
        default=DEFAULT_MAX_FILE_BYTES,
        help="Skip the contents of files larger than SIZE, e.g. 500KB or 2MiB (default: 1MiB).",
    )
    parser.add_argument(
        "-c",
        "--max-output-chars",
        type=non_negative_int,
        metavar="CHARS",
        default=DEFAULT_MAX_OUTPUT_CHARS,
        help=f"Truncate each file's extracted text to CHARS characters, 0 for no limit (default: {DEFAULT_MAX_OUTPUT_CHARS}).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        metavar="PATTERN",
        action="append",
        default=[],
        help=(
            "Gitignore-style pattern, relative to the directory, excluding matching files and directories "
            "(can be specified multiple times)."
        ),
    )
    parser.add_argument(
        "--external-tree",
        action="store_true",
        help="Render the tree with the native 'tree' utility, falling back to the built-in renderer on failure.",
    )
    parser.add_argument(
        "--external-unzip",
        action="store_true",
        help="Expand .docx/.xlsx files with the native archive utility instead of the built-in one.",
    )
    parser.add_argument(
        "-T",
        "--tree-only",
        action="store_true",
        help="Produce only the directory tree section.",
    )
    parser.add_argument(
        "--force-locale",
        action="store_true",
        help="Decode files without a byte-order mark with the legacy encoding, without trying UTF-8 first.",
    )
    parser.add_argument(
        "--legacy-encoding",
        metavar="ENC",
        help="Legacy encoding for files that are not UTF-8 (default: the locale encoding, or cp1252).",
    )
    parser.add_argument(
        "--no-bom",
        action="store_true",
        help="Do not write a UTF-8 byte-order mark at the start of the output file.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout", "file"],
        help="Print summary counts. Valid destinations: stderr, stdout, file (requires -o)",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model for counting tokens in the summary (e.g., gpt-4). Implies -s stderr if -s is not given.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat for debug output.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.summary == "file" and not args.output:
        raise ValueError("--summary=file requires -o/--output to be specified")

    if args.legacy_encoding:
        try:
            codecs.lookup(args.legacy_encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {args.legacy_encoding}")

    if args.tokenizer and not args.summary:
        args.summary = "stderr"


def build_config(args: argparse.Namespace) -> ReportConfig:
    """Map parsed arguments onto a ReportConfig.

    Example:
        >>> args = create_parser().parse_args(["proj", "-x", "Fixtures", "--no-default-excludes", "-I", "py"])
        >>> config = build_config(args)
        >>> sorted(config.exclude_dir_names), sorted(config.include_extensions)
        (['fixtures'], ['.py'])
    """
    exclude_dir_names = set() if args.no_default_excludes else set(DEFAULT_EXCLUDE_DIR_NAMES)
    exclude_dir_names.update(args.exclude_dir)

    return ReportConfig(
        root_path=args.directory,
        include_extensions=args.include_ext or None,
        exclude_dir_names=exclude_dir_names,
        max_file_bytes=args.max_file_size,
        max_output_chars=args.max_output_chars,
        use_external_tree=args.external_tree,
        tree_only=args.tree_only,
        no_bom_text_mode=NoBomTextMode.FORCE_LOCALE if args.force_locale else NoBomTextMode.AUTO_UTF8_THEN_LOCALE,
        legacy_encoding=args.legacy_encoding,
        ignore_patterns=tuple(args.ignore),
        use_external_unzip=args.external_unzip,
    )
