"""Unit tests for the CLI main module."""

import codecs
from unittest.mock import patch

import pytest

from dir2report.cli.main import format_summary, main
from dir2report.dir2report import ReportResult
from dir2report.exceptions import ToolNotFoundError
from dir2report.token_counter import TokenCounter
from dir2report.tools.native_tree import NativeTreeLister


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    (root / "hello.txt").write_text("hello\n")
    (root / "node_modules").mkdir()
    (root / "node_modules" / "dep.js").write_text("skip")
    return root


def run(argv):
    """Run main and return its exit code (0 when it returns normally)."""
    try:
        main(argv)
    except SystemExit as e:
        return e.code
    return 0


def test_report_to_stdout(project, capsys):
    assert run([str(project)]) == 0
    captured = capsys.readouterr()
    assert captured.out.startswith(f"# Directory report: {project}\n")
    assert "----- BEGIN FILE: hello.txt [6 bytes] ----" in captured.out
    assert "node_modules" not in captured.out
    assert captured.err == ""


def test_report_to_file_with_bom(project, tmp_path, capsys):
    output = tmp_path / "report.md"
    assert run([str(project), "-o", str(output)]) == 0
    data = output.read_bytes()
    assert data.startswith(codecs.BOM_UTF8)
    assert data[len(codecs.BOM_UTF8) :].decode("utf-8").startswith("# Directory report:")
    assert capsys.readouterr().out == ""


def test_report_to_file_without_bom(project, tmp_path):
    output = tmp_path / "report.md"
    assert run([str(project), "-o", str(output), "--no-bom"]) == 0
    assert output.read_bytes().startswith(b"# Directory report:")


def test_missing_directory_is_fatal(tmp_path, capsys):
    missing = tmp_path / "missing"
    assert run([str(missing)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert f"Error: Directory not found: {missing}" in captured.err


def test_missing_directory_does_not_create_output(tmp_path):
    output = tmp_path / "report.md"
    assert run([str(tmp_path / "missing"), "-o", str(output)]) == 1
    assert not output.exists()


def test_summary_file_requires_output(project, capsys):
    assert run([str(project), "-s", "file"]) == 2
    assert "requires -o/--output" in capsys.readouterr().err


def test_unknown_legacy_encoding_is_usage_error(project, capsys):
    assert run([str(project), "--legacy-encoding", "no-such-codec"]) == 2
    assert "Unknown encoding" in capsys.readouterr().err


def test_output_cap_below_note_length_is_usage_error(project, capsys):
    assert run([str(project), "-c", "3"]) == 2
    assert "max_output_chars must be 0 (unlimited) or at least 5" in capsys.readouterr().err


def test_summary_to_stderr(project, capsys):
    assert run([str(project), "-s", "stderr"]) == 0
    captured = capsys.readouterr()
    assert "Directories: 0\nFiles: 1\nSymlinks: 0\n" in captured.err
    assert f"Characters: {len(captured.out)}" in captured.err
    assert "Tokens:" not in captured.err


def test_summary_to_stdout_follows_report(project, capsys):
    assert run([str(project), "-s", "stdout"]) == 0
    out = capsys.readouterr().out
    assert out.index("----- END FILE:") < out.index("Files: 1")


def test_summary_appended_to_file(project, tmp_path):
    output = tmp_path / "report.md"
    assert run([str(project), "-o", str(output), "-s", "file", "--no-bom"]) == 0
    report, summary = output.read_text(encoding="utf-8").split("\nDirectories: ")
    assert summary.startswith("0\nFiles: 1\nSymlinks: 0\n")
    assert summary.endswith(f"Characters: {len(report)}\n")


def test_tokenizer_without_tiktoken(project, capsys):
    with patch("dir2report.token_counter.check_tiktoken_available", return_value=False):
        assert run([str(project), "-t", "gpt-4"]) == 1
    err = capsys.readouterr().err
    assert "Error: Token counting was requested with -t/--tokenizer" in err
    assert 'pip install "dir2report[token_counting]"' in err


def test_tree_warning_goes_to_stderr(project, capsys, fake_runner, monkeypatch):
    runner = fake_runner(error=ToolNotFoundError("tree", "executable not found"))
    monkeypatch.setattr("dir2report.dir2report.NativeTreeLister", lambda: NativeTreeLister(runner, windows=False))
    assert run([str(project), "--external-tree"]) == 0
    captured = capsys.readouterr()
    assert "Warning: Native tree listing failed (tree: executable not found)" in captured.err
    assert "└── hello.txt" in captured.out


def test_keyboard_interrupt(project, capsys):
    with patch("dir2report.cli.main.generate_report", side_effect=KeyboardInterrupt):
        assert run([str(project)]) == 130
    assert "Interrupted" in capsys.readouterr().err


def test_broken_pipe(project, capsys):
    with patch("dir2report.cli.main.ReportWriter", side_effect=BrokenPipeError):
        assert run([str(project)]) == 141


def test_unexpected_error(project, capsys):
    with patch("dir2report.cli.main.generate_report", side_effect=RuntimeError("kaboom")):
        assert run([str(project)]) == 1
    assert "Error: kaboom" in capsys.readouterr().err


def test_version(capsys):
    assert run(["--version"]) == 0
    assert capsys.readouterr().out.startswith("dir2report ")


def test_format_summary_with_tokens():
    counter = TokenCounter()
    counter.count("one\ntwo\n")
    counter.total_tokens = 4
    summary = format_summary(ReportResult("", file_count=2, directory_count=5, symlink_count=1), counter)
    assert summary.splitlines() == [
        "Directories: 5",
        "Files: 2",
        "Symlinks: 1",
        "Lines: 2",
        "Tokens: 4",
        "Characters: 8",
    ]
