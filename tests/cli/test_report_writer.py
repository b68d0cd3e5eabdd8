"""Tests for ReportWriter."""

import codecs
import errno
from unittest.mock import MagicMock

import pytest

from dir2report.cli.report_writer import ReportWriter


def test_file_starts_with_bom(tmp_path):
    path = tmp_path / "report.md"
    with ReportWriter(path) as writer:
        writer.write("# Títle\n")
        writer.write("more\n")
    assert path.read_bytes() == codecs.BOM_UTF8 + "# Títle\nmore\n".encode("utf-8")


def test_file_without_bom(tmp_path):
    path = tmp_path / "report.md"
    with ReportWriter(path, bom=False) as writer:
        writer.write("plain\n")
    assert path.read_bytes() == b"plain\n"


def test_bom_written_for_empty_report(tmp_path):
    path = tmp_path / "report.md"
    with ReportWriter(path) as writer:
        writer.write("")
    assert path.read_bytes() == codecs.BOM_UTF8


def test_existing_file_is_overwritten(tmp_path):
    path = tmp_path / "report.md"
    path.write_bytes(b"old content that is longer")
    with ReportWriter(path, bom=False) as writer:
        writer.write("new")
    assert path.read_bytes() == b"new"


def test_stdout_has_no_bom(capsys):
    with ReportWriter() as writer:
        writer.write("to stdout\n")
    assert capsys.readouterr().out == "to stdout\n"


def test_write_after_close(tmp_path):
    writer = ReportWriter(tmp_path / "report.md")
    writer.close()
    writer.close()
    with pytest.raises(ValueError, match="closed"):
        writer.write("late")


def test_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        ReportWriter(tmp_path / "missing" / "report.md")


def test_close_ignores_broken_pipe(tmp_path):
    writer = ReportWriter(tmp_path / "report.md")
    writer._stream.close()
    writer._stream = MagicMock()
    writer._stream.flush.side_effect = OSError(errno.EPIPE, "Broken pipe")
    writer.close()


def test_close_propagates_other_errors(tmp_path):
    writer = ReportWriter(tmp_path / "report.md")
    writer._stream.close()
    writer._stream = MagicMock()
    writer._stream.flush.side_effect = OSError(errno.ENOSPC, "No space left on device")
    with pytest.raises(OSError):
        writer.close()
