"""
Unit tests for the command-line interface.
"""

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from fsfind.cli import attach_option_values, build_parser, main
from fsfind.tools.fs_walker import FSWalker


class TestAttachOptionValues:
    """Test cases for joining dash-prefixed option values."""

    def test_negative_values_are_attached(self):
        assert attach_option_values(["-s", "-100k"]) == ["-s-100k"]
        assert attach_option_values(["-t", "-3"]) == ["-t-3"]

    def test_bundles_ending_in_value_flag(self):
        assert attach_option_values(["-fs", "-1k"]) == ["-fs-1k"]

    def test_plain_values_untouched(self):
        args = ["src", "-t", "+7", "-n", "*.c"]
        assert attach_option_values(args) == args

    def test_value_that_looks_like_a_flag(self):
        """The argument after a value flag is always its value."""
        assert attach_option_values(["-n", "-e", "-f"]) == ["-n-e", "-f"]

    def test_config_value_attached(self):
        assert attach_option_values(["-c", "-odd.yaml"]) == ["-c-odd.yaml"]
        assert attach_option_values(["-qc", "-odd.yaml"]) == ["-qc-odd.yaml"]

    def test_double_dash_stops_processing(self):
        assert attach_option_values(["--", "-s", "-1"]) == ["--", "-s", "-1"]


class TestBuildParser:
    """Test cases for argument parsing."""

    def test_bundled_switches(self):
        ns = build_parser().parse_args(attach_option_values(["-fde"]))

        assert ns.files_only and ns.dirs_only and ns.empty
        assert ns.path is None

    def test_bundle_with_trailing_value(self):
        ns = build_parser().parse_args(attach_option_values(["src", "-fn", "main.c"]))

        assert ns.path == "src"
        assert ns.files_only
        assert ns.name == "main.c"

    def test_dash_prefixed_config_path(self):
        ns = build_parser().parse_args(attach_option_values(["-q", "-c", "-odd.yaml"]))

        assert ns.quiet
        assert ns.config == "-odd.yaml"

    def test_negative_specs(self):
        ns = build_parser().parse_args(attach_option_values(["-s", "-10k", "-t", "-3"]))

        assert ns.size == "-10k"
        assert ns.mtime == "-3"


class TestMain:
    """End-to-end tests of the fsfind command."""

    def setup_method(self):
        """Create root/{a.txt (0 bytes), b/{c.log (10 bytes)}} and a config file."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = os.path.join(self.temp_dir, "root")
        os.mkdir(self.root)
        Path(self.root, "a.txt").write_bytes(b"")
        os.mkdir(os.path.join(self.root, "b"))
        Path(self.root, "b", "c.log").write_bytes(b"0123456789")

        self.config_path = os.path.join(self.temp_dir, "fsfind.yaml")
        Path(self.config_path).write_text("logging:\n  level: WARNING\n")

    def teardown_method(self):
        logging.getLogger().handlers.clear()
        logging.getLogger().setLevel(logging.WARNING)
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def run(self, *args):
        return main([self.root, "--config", self.config_path, *args])

    def path(self, *parts):
        return os.path.join(self.root, *parts)

    def test_empty_files(self, capsys):
        assert self.run("-f", "-e") == 0
        assert capsys.readouterr().out == self.path("a.txt") + "\n"

    def test_bundled_flags(self, capsys):
        assert self.run("-fe") == 0
        assert capsys.readouterr().out == self.path("a.txt") + "\n"

    def test_directory_by_name(self, capsys):
        assert self.run("-d", "-n", "b") == 0
        assert capsys.readouterr().out == self.path("b") + "\n"

    def test_negative_size(self, capsys):
        assert self.run("-f", "-s", "-5") == 0
        assert capsys.readouterr().out == self.path("a.txt") + "\n"

    def test_recent_files(self, capsys):
        assert self.run("-f", "-t", "-1", "--sort") == 0
        assert capsys.readouterr().out == self.path("a.txt") + "\n" + self.path("b", "c.log") + "\n"

    def test_case_insensitive_name(self, capsys):
        assert self.run("-i", "C.LOG") == 0
        assert capsys.readouterr().out == self.path("b", "c.log") + "\n"

    def test_print0(self, capsys):
        assert self.run("-f", "--print0", "--sort") == 0
        assert capsys.readouterr().out == self.path("a.txt") + "\0" + self.path("b", "c.log") + "\0"

    def test_sorted_output_from_config(self, capsys):
        Path(self.config_path).write_text("output:\n  sort: true\n")

        assert self.run() == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == sorted(lines)
        assert len(lines) == 4

    def test_default_path_from_config(self, capsys):
        Path(self.config_path).write_text(f"search_path: {self.path('b')}\n")

        assert main(["-f", "--config", self.config_path]) == 0
        assert capsys.readouterr().out == self.path("b", "c.log") + "\n"

    def test_invalid_size(self, capsys):
        assert self.run("-s", "huge") == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "invalid size specification" in captured.err

    def test_invalid_permission(self, capsys):
        assert self.run("-p", "rwx") == 2
        assert "invalid permission specification" in capsys.readouterr().err

    def test_missing_config(self, capsys):
        assert main([self.root, "--config", os.path.join(self.temp_dir, "nope.yaml")]) == 2
        assert "Configuration file not found" in capsys.readouterr().err

    def test_diagnostics_go_to_stderr(self, capsys):
        unreadable = self.path("b")

        def failing_open(walker, path):
            if path == unreadable:
                raise PermissionError(errno.EACCES, "Permission denied", path)
            return os.scandir(path)

        with patch.object(FSWalker, '_open_dir', autospec=True, side_effect=failing_open):
            assert self.run("-f") == 0

        captured = capsys.readouterr()
        assert captured.out == self.path("a.txt") + "\n"
        assert f"fsfind: cannot access '{unreadable}': Permission denied" in captured.err

    def test_quiet_suppresses_diagnostics(self, capsys):
        missing = os.path.join(self.temp_dir, "missing")

        assert main([missing, "--config", self.config_path, "-q"]) == 0
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_help_exits_cleanly(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-h"])
        assert exc_info.value.code == 0
        assert "-n PATTERN" in capsys.readouterr().out
