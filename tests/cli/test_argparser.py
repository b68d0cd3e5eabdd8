"""Unit tests for the argument parser module in dir2report CLI."""

import argparse
from pathlib import Path

import pytest

from dir2report.cli.argparser import build_config, create_parser, file_size, non_negative_int, validate_args
from dir2report.config import DEFAULT_EXCLUDE_DIR_NAMES, DEFAULT_INCLUDE_EXTENSIONS
from dir2report.encoding.no_bom_mode import NoBomTextMode


@pytest.fixture
def parser():
    return create_parser()


def test_defaults(parser):
    args = parser.parse_args(["project"])
    assert args.directory == Path("project")
    assert args.output is None
    assert args.exclude_dir == []
    assert args.include_ext == []
    assert args.max_file_size == 1024 * 1024
    assert args.max_output_chars == 1024 * 1024
    assert args.summary is None
    assert args.tokenizer is None
    assert not args.tree_only
    assert not args.no_bom


def test_directory_is_required(parser, capsys):
    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args([])
    assert exc_info.value.code == 2
    assert "directory" in capsys.readouterr().err


def test_repeatable_options(parser):
    args = parser.parse_args(["p", "-x", "fixtures", "-x", "tmp", "-I", "py", "-I", ".md", "-i", "*.log"])
    assert args.exclude_dir == ["fixtures", "tmp"]
    assert args.include_ext == ["py", ".md"]
    assert args.ignore == ["*.log"]


@pytest.mark.parametrize(
    "value, expected",
    [("1024", 1024), ("500KB", 500000), ("2MiB", 2 * 1024 * 1024)],
)
def test_file_size(value, expected):
    assert file_size(value) == expected


def test_file_size_rejects_garbage():
    with pytest.raises(argparse.ArgumentTypeError):
        file_size("lots")


def test_non_negative_int():
    assert non_negative_int("0") == 0
    with pytest.raises(argparse.ArgumentTypeError, match="must not be negative"):
        non_negative_int("-1")
    with pytest.raises(argparse.ArgumentTypeError, match="invalid integer"):
        non_negative_int("ten")


def test_invalid_size_is_a_usage_error(parser):
    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["p", "-m", "huge"])
    assert exc_info.value.code == 2


def test_invalid_summary_destination(parser):
    with pytest.raises(SystemExit):
        parser.parse_args(["p", "-s", "printer"])


def test_summary_file_requires_output(parser):
    args = parser.parse_args(["p", "-s", "file"])
    with pytest.raises(ValueError, match="requires -o/--output"):
        validate_args(args)


def test_summary_file_with_output(parser):
    args = parser.parse_args(["p", "-s", "file", "-o", "out.md"])
    validate_args(args)
    assert args.summary == "file"


def test_tokenizer_implies_stderr_summary(parser):
    args = parser.parse_args(["p", "-t", "gpt-4"])
    validate_args(args)
    assert args.summary == "stderr"


def test_tokenizer_keeps_explicit_summary(parser):
    args = parser.parse_args(["p", "-t", "gpt-4", "-s", "stdout"])
    validate_args(args)
    assert args.summary == "stdout"


def test_unknown_legacy_encoding(parser):
    args = parser.parse_args(["p", "--legacy-encoding", "no-such-codec"])
    with pytest.raises(ValueError, match="Unknown encoding: no-such-codec"):
        validate_args(args)


def test_build_config_defaults(parser):
    config = build_config(parser.parse_args(["p"]))
    assert config.include_extensions == DEFAULT_INCLUDE_EXTENSIONS
    assert config.exclude_dir_names == DEFAULT_EXCLUDE_DIR_NAMES
    assert config.no_bom_text_mode is NoBomTextMode.AUTO_UTF8_THEN_LOCALE
    assert config.ignore_patterns == ()
    assert not config.use_external_tree
    assert not config.use_external_unzip


def test_build_config_extra_excludes_extend_defaults(parser):
    config = build_config(parser.parse_args(["p", "-x", "Fixtures"]))
    assert "fixtures" in config.exclude_dir_names
    assert DEFAULT_EXCLUDE_DIR_NAMES < config.exclude_dir_names


def test_build_config_options(parser):
    args = parser.parse_args(
        [
            "p",
            "--force-locale",
            "--legacy-encoding",
            "cp1251",
            "--external-tree",
            "--external-unzip",
            "-T",
            "-c",
            "0",
            "-m",
            "2KiB",
            "-i",
            "docs/",
        ]
    )
    config = build_config(args)
    assert config.no_bom_text_mode is NoBomTextMode.FORCE_LOCALE
    assert config.legacy_encoding == "cp1251"
    assert config.use_external_tree
    assert config.use_external_unzip
    assert config.tree_only
    assert config.max_output_chars == 0
    assert config.max_file_bytes == 2048
    assert config.ignore_patterns == ("docs/",)
