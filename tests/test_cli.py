from __future__ import annotations

import os
import logging
import warnings
from pathlib import Path
from typing import Any, Callable
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from peerdep.cli import cli, main
from peerdep.__version__ import __version__
from peerdep.constants import MISSING_PEER_MESSAGE


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.setenv("NO_COLOR", "")
    return tmp_path


@pytest.mark.unit
class TestCliOptions:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"peerdep-checker {__version__}"

    def test_help_lists_flags(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for flag in ("--json", "--summary", "--only-incompatible", "--html", "--hide-progress"):
            assert flag in result.output

    def test_no_color_sets_env(
        self,
        write_manifest: Callable[..., Path],
        fake_registry: Callable[..., Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        write_manifest({})
        fake_registry({})

        result = CliRunner().invoke(cli, ["react", "--no-color"])

        assert result.exit_code == 0
        assert os.environ.get("NO_COLOR") == "1"

    def test_verbose_flags_set_log_level(self) -> None:
        CliRunner().invoke(cli, ["-vv"])

        assert logging.getLogger("peerdep").level == logging.DEBUG

    def test_target_version_reaches_the_check(
        self,
        write_manifest: Callable[..., Path],
        fake_registry: Callable[..., Any],
    ) -> None:
        write_manifest({"a": "1.0.0"})
        fake_registry({"a": {"version": "2.0.0", "peerDependencies": {"react": "^18.0.0"}}})

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = CliRunner().invoke(
                cli, ["react", "17.0.0", "--json", "--hide-progress"]
            )

        assert result.exit_code == 0, result.output
        assert '"compatible": false' in result.output
        assert not [w for w in caught if "overwrite each other" in str(w.message)]

    def test_version_flag_alongside_peer_arguments(self) -> None:
        result = CliRunner().invoke(cli, ["react", "18.2.0", "--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"peerdep-checker {__version__}"

    def test_bare_html_flag_is_usage_error(self) -> None:
        result = CliRunner().invoke(cli, ["react", "18.2.0", "--html"])

        assert result.exit_code == 2

    def test_missing_config_file_is_usage_error(self) -> None:
        result = CliRunner().invoke(cli, ["react", "-c", "missing.toml"])

        assert result.exit_code == 2


@pytest.mark.unit
class TestMain:
    """Exit code mapping of the console-script entry point."""

    def test_missing_peer_returns_1(self, capsys: pytest.CaptureFixture) -> None:
        with patch("sys.argv", ["peerdep-checker"]):
            assert main() == 1

        captured = capsys.readouterr()
        assert MISSING_PEER_MESSAGE in captured.err
        assert captured.out == ""

    def test_success_returns_0(
        self,
        write_manifest: Callable[..., Path],
        fake_registry: Callable[..., Any],
        capsys: pytest.CaptureFixture,
    ) -> None:
        write_manifest({"swr": "^2.0.0"})
        fake_registry({"swr": {"version": "2.2.5", "peerDependencies": {"react": "^18"}}})

        with patch("sys.argv", ["peerdep-checker", "react", "18.2.0", "--hide-progress"]):
            assert main() == 0

        assert "swr" in capsys.readouterr().out

    def test_usage_error_returns_2(self, capsys: pytest.CaptureFixture) -> None:
        with patch("sys.argv", ["peerdep-checker", "react", "--bogus"]):
            assert main() == 2

        assert "--bogus" in capsys.readouterr().err

    def test_version_flag_returns_0(self, capsys: pytest.CaptureFixture) -> None:
        with patch("sys.argv", ["peerdep-checker", "--version"]):
            assert main() == 0

    def test_keyboard_interrupt_returns_130(self) -> None:
        with patch("peerdep.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130

    def test_unexpected_error_returns_1(self, capsys: pytest.CaptureFixture) -> None:
        with patch("peerdep.cli.cli", side_effect=RuntimeError("boom")):
            assert main() == 1

        assert "Unexpected error: boom" in capsys.readouterr().err

    def test_system_exit_without_code_returns_0(self) -> None:
        with patch("peerdep.cli.cli", side_effect=SystemExit()):
            assert main() == 0
