"""
CLI tests — argument handling, exit codes and reported savings.
These guard the operator-facing contract: fatal conditions must never exit 0.
"""
import logging
import os
import sys
import pytest
from unittest import mock
from onelink.cli import CLIApplication, main
from onelink.core.models import HashAlgorithmName, TEMP_SUFFIX


def run_cli(argv):
    """Run the CLI like the console script would, returning the exit code."""
    with mock.patch.object(sys, "argv", ["onelink", *argv]):
        try:
            main()
        except SystemExit as e:
            return e.code
    return 0


class TestArgumentParsing:

    def test_defaults(self):
        args = CLIApplication.parse_args([])
        assert args.root == "."
        assert args.dry_run is False
        assert args.include_dotfiles is False
        assert args.min_size == "1"
        assert args.algorithm == "sha256"
        assert args.jobs >= 1
        assert args.log_level is None

    def test_create_params_maps_flags(self, temp_dir):
        app = CLIApplication()
        args = app.parse_args([
            str(temp_dir), "-n", "-j", "3", "-a", "-m", "4K", "--algorithm", "xxh128"
        ])
        params = app.create_params(args)

        assert params.root_dir == str(temp_dir)
        assert params.dry_run is True
        assert params.workers == 3
        assert params.exclude_dotfiles is False
        assert params.min_size_bytes == 4096
        assert params.algorithm is HashAlgorithmName.XXH128
        assert params.log_level == "info"

    @pytest.mark.parametrize("argv, expected", [
        ([], "warning"),
        (["--dry-run"], "info"),
        (["--verbose"], "debug"),
        (["--dry-run", "--log-level", "error"], "error"),
    ])
    def test_resolve_log_level(self, argv, expected):
        args = CLIApplication.parse_args(argv)
        assert CLIApplication.resolve_log_level(args) == expected

    @pytest.mark.parametrize("level", ["warn", "warning"])
    def test_warn_log_level_accepted(self, temp_dir, level):
        app = CLIApplication()
        params = app.create_params(app.parse_args([str(temp_dir), "--log-level", level]))
        assert params.log_level == level

        app.configure_logging(params.log_level)
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_algorithm_rejected_by_argparse(self):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication.parse_args(["--algorithm", "md5"])
        assert exc_info.value.code == 2


class TestExitCodes:

    def test_success_merges_and_reports(self, test_files, temp_dir, capsys):
        code = run_cli([str(temp_dir)])

        assert code == 0
        assert os.stat(test_files["a"]).st_ino == os.stat(test_files["b"]).st_ino
        out = capsys.readouterr().out
        assert "Saved 2.00KB of disk space (2 duplicates)" in out

    def test_dry_run_reports_without_linking(self, test_files, temp_dir, capsys):
        code = run_cli(["--dry-run", str(temp_dir)])

        assert code == 0
        assert os.stat(test_files["a"]).st_ino != os.stat(test_files["b"]).st_ino
        assert "Would save 2.00KB of disk space" in capsys.readouterr().out

    def test_quiet_prints_no_summary(self, test_files, temp_dir, capsys):
        assert run_cli(["--quiet", str(temp_dir)]) == 0
        assert capsys.readouterr().out == ""

    def test_verbose_and_quiet_are_mutually_exclusive(self, temp_dir, capsys):
        assert run_cli(["-v", "-q", str(temp_dir)]) == 2
        assert "mutually exclusive" in capsys.readouterr().err

    def test_leftover_temp_file_exits_non_zero(self, temp_dir, capsys):
        (temp_dir / "a").write_bytes(b"X")
        (temp_dir / "b").write_bytes(b"X")
        (temp_dir / f"a{TEMP_SUFFIX}").write_bytes(b"X")

        code = run_cli([str(temp_dir)])

        assert code == 1
        assert "previous failed run" in capsys.readouterr().err
        assert os.stat(temp_dir / "a").st_ino != os.stat(temp_dir / "b").st_ino

    def test_missing_root_exits_non_zero(self, temp_dir):
        assert run_cli([str(temp_dir / "nope")]) == 1

    def test_zero_jobs_rejected(self, temp_dir):
        assert run_cli(["-j", "0", str(temp_dir)]) == 2

    @pytest.mark.parametrize("size", ["lots", "INFK", "inf", "nan"])
    def test_bad_size_rejected(self, temp_dir, size):
        assert run_cli(["-m", size, str(temp_dir)]) == 2

    def test_warn_log_level_runs(self, test_files, temp_dir):
        assert run_cli(["--log-level", "warn", str(temp_dir)]) == 0

    def test_verbose_error_starts_on_fresh_line(self, temp_dir, capsys):
        (temp_dir / f"a{TEMP_SUFFIX}").write_bytes(b"X")

        assert run_cli(["--verbose", str(temp_dir)]) == 1
        err = capsys.readouterr().err
        assert "\n❌ Error:" in err

    def test_merge_failure_exits_non_zero(self, test_files, temp_dir, capsys):
        with mock.patch("onelink.core.merger.os.link", side_effect=OSError("EXDEV")):
            code = run_cli([str(temp_dir)])

        assert code == 1
        assert "link failed" in capsys.readouterr().err

    def test_unexpected_error_exits_one(self, temp_dir, capsys, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        with mock.patch("onelink.cli.HardlinkCommand.execute", side_effect=KeyError("bug")):
            code = run_cli([str(temp_dir)])
        assert code == 1
        assert "Unexpected error" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_130(self, temp_dir):
        with mock.patch("onelink.cli.HardlinkCommand.execute", side_effect=KeyboardInterrupt):
            assert run_cli([str(temp_dir)]) == 130

    def test_verbose_shows_progress_and_stats(self, test_files, temp_dir, capsys):
        assert run_cli(["--verbose", str(temp_dir)]) == 0
        captured = capsys.readouterr()
        assert "[Checksum]" in captured.err
        assert "Run Statistics:" in captured.out
