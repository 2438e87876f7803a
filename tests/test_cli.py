"""Tests for the command-line driver.

WHY: The CLI is how the formatter is actually used: piping through stdin,
checking a tree with -l in CI, rewriting files with -w. A wrong exit code
or a file rewritten after a failed format is worse than no tool.

HOW: main() is called with explicit argv. File-system tests use tmp_path;
stdout is captured with capsys, log records with caplog.
"""

import io
import logging
import sys

import pytest

from asmfmt.cli import build_parser, iter_source_files, main, unified_diff

UNFORMATTED = b"MOVQ AX,BX\nRET\n"
FORMATTED = b"\tMOVQ AX, BX\n\tRET\n"


def _stdin(monkeypatch, data):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


class TestStdin:
    """No paths: stdin to stdout."""

    def test_formats_stdin(self, monkeypatch, capsys):
        _stdin(monkeypatch, UNFORMATTED)
        assert main([]) == 0
        assert capsys.readouterr().out == FORMATTED.decode()

    def test_stdin_error(self, monkeypatch, capsys, caplog):
        _stdin(monkeypatch, b"package main\n")
        with caplog.at_level(logging.ERROR):
            assert main([]) == 1
        assert capsys.readouterr().out == ""
        assert "Go files are not supported" in caplog.text

    def test_write_with_stdin_is_usage_error(self, monkeypatch):
        _stdin(monkeypatch, UNFORMATTED)
        with pytest.raises(SystemExit) as exc:
            main(["-w"])
        assert exc.value.code == 2

    def test_list_stdin(self, monkeypatch, capsys):
        _stdin(monkeypatch, UNFORMATTED)
        assert main(["-l"]) == 0
        assert capsys.readouterr().out == "<standard input>\n"


class TestFiles:
    """Explicit file paths."""

    def test_prints_formatted_source(self, tmp_path, capsys):
        path = tmp_path / "a.s"
        path.write_bytes(UNFORMATTED)
        assert main([str(path)]) == 0
        assert capsys.readouterr().out == FORMATTED.decode()
        assert path.read_bytes() == UNFORMATTED

    def test_write_rewrites_file(self, tmp_path, capsys):
        path = tmp_path / "a.s"
        path.write_bytes(UNFORMATTED)
        assert main(["-w", str(path)]) == 0
        assert path.read_bytes() == FORMATTED
        assert capsys.readouterr().out == ""

    def test_list_only_changed(self, tmp_path, capsys):
        dirty = tmp_path / "dirty.s"
        dirty.write_bytes(UNFORMATTED)
        clean = tmp_path / "clean.s"
        clean.write_bytes(FORMATTED)
        assert main(["-l", str(dirty), str(clean)]) == 0
        assert capsys.readouterr().out == "{}\n".format(dirty)

    def test_clean_file_logged_as_skipped(self, tmp_path, caplog):
        path = tmp_path / "clean.s"
        path.write_bytes(FORMATTED)
        with caplog.at_level(logging.INFO):
            assert main(["-l", str(path)]) == 0
        assert "skipping {}".format(path) in caplog.text

    def test_diff(self, tmp_path, capsys):
        path = tmp_path / "a.s"
        path.write_bytes(UNFORMATTED)
        assert main(["-d", str(path)]) == 0
        out = capsys.readouterr().out
        assert "--- a/{}".format(path) in out
        assert "+\tMOVQ AX, BX" in out
        assert "-MOVQ AX,BX" in out

    def test_failed_file_not_rewritten(self, tmp_path, caplog):
        path = tmp_path / "main.s"
        path.write_bytes(b"package main\n")
        with caplog.at_level(logging.ERROR):
            assert main(["-w", str(path)]) == 1
        assert path.read_bytes() == b"package main\n"
        assert str(path) in caplog.text

    def test_missing_path(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            assert main([str(tmp_path / "nope.s")]) == 1
        assert "no such file or directory" in caplog.text

    def test_one_failure_does_not_stop_the_rest(self, tmp_path):
        bad = tmp_path / "bad.s"
        bad.write_bytes(b"\x00")
        good = tmp_path / "good.s"
        good.write_bytes(UNFORMATTED)
        assert main(["-w", str(bad), str(good)]) == 1
        assert good.read_bytes() == FORMATTED


class TestDirectories:
    """Directories are walked for assembler files."""

    def test_walk_picks_source_files_only(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.s").write_bytes(FORMATTED)
        (tmp_path / "a.s").write_bytes(FORMATTED)
        (tmp_path / "main.go").write_bytes(b"package main\n")
        found = list(iter_source_files(tmp_path))
        assert found == [tmp_path / "a.s", tmp_path / "sub" / "b.s"]

    def test_explicit_file_any_suffix(self, tmp_path):
        path = tmp_path / "x.asm"
        path.write_bytes(FORMATTED)
        assert list(iter_source_files(path)) == [path]

    def test_list_directory(self, tmp_path, capsys):
        (tmp_path / "a.s").write_bytes(UNFORMATTED)
        (tmp_path / "main.go").write_bytes(b"package main\n")
        assert main(["-l", str(tmp_path)]) == 0
        assert capsys.readouterr().out == "{}\n".format(tmp_path / "a.s")


class TestHelpers:
    """Parser and diff helpers."""

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.paths == []
        assert not (args.list or args.write or args.diff or args.verbose)

    def test_diff_empty_when_unchanged(self):
        assert unified_diff("x.s", FORMATTED, FORMATTED) == b""
