"""Tests for the ``onionware`` command line."""

from __future__ import annotations

import sys
import types
from typing import Any
from unittest.mock import MagicMock

import pytest

from onionware import cli


class Good:
    async def handle(self, request: Any, response: Any, next: Any) -> None:
        await next()


@pytest.fixture
def fake_middleware_module(monkeypatch: pytest.MonkeyPatch) -> str:
    module = types.ModuleType("onionware_cli_fixture")
    module.Good = Good  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "onionware_cli_fixture", module)
    return "onionware_cli_fixture"


@pytest.fixture(autouse=True)
def no_file_logging(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock(return_value=("log.txt", "INFO"))
    monkeypatch.setattr(cli, "setup_logging", mock)
    return mock


def _write(tmp_path, body: str) -> str:
    path = tmp_path / "middleware.yaml"
    path.write_text(body, encoding="utf-8")
    return str(path)


class TestCheck:
    def test_all_resolved(self, tmp_path, capsys, fake_middleware_module: str) -> None:
        path = _write(
            tmp_path,
            f"global:\n  - {fake_middleware_module}:Good\n"
            f"named:\n  auth: {fake_middleware_module}.Good\n",
        )
        cli.main(["check", "--config", path])
        out = capsys.readouterr().out
        assert "All 2 middleware resolved." in out

    def test_unresolvable_exits_1(self, tmp_path, capsys, fake_middleware_module: str) -> None:
        path = _write(
            tmp_path,
            f"global:\n  - {fake_middleware_module}:Good\n"
            f"named:\n  auth: {fake_middleware_module}:Missing\n",
        )
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["check", "--config", path])
        assert exc_info.value.code == 1
        assert "1 middleware could not be resolved." in capsys.readouterr().out

    def test_bad_config_exits_2(self, tmp_path, capsys) -> None:
        path = _write(tmp_path, "version: '7'\n")
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["check", "--config", path])
        assert exc_info.value.code == 2
        assert "Configuration validation failed" in capsys.readouterr().out

    def test_log_level_flag_overrides_config(
        self, tmp_path, no_file_logging: MagicMock
    ) -> None:
        path = _write(tmp_path, "logging:\n  level: error\n  log_dir: custom\n")
        cli.main(["check", "--config", path, "--log-level", "debug"])
        no_file_logging.assert_called_once_with("debug", log_dir="custom", quiet=True)

    def test_config_log_level_used_by_default(
        self, tmp_path, no_file_logging: MagicMock
    ) -> None:
        path = _write(tmp_path, "logging:\n  level: error\n")
        cli.main(["check", "--config", path])
        no_file_logging.assert_called_once_with("ERROR", log_dir="logs", quiet=True)


class TestList:
    def test_prints_global_and_named(self, tmp_path, capsys) -> None:
        path = _write(
            tmp_path,
            "global:\n  - G1\n  - G2\n  - G1\nnamed:\n  auth: A\n",
        )
        cli.main(["list", "--config", path])
        out = capsys.readouterr().out
        assert "Global middleware" in out
        assert "Named middleware" in out
        assert out.count("G1") == 1
        assert "G2" in out
        assert "auth" in out


class TestParser:
    def test_no_command_prints_help(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 1
        assert "check" in capsys.readouterr().out

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(SystemExit):
            cli.main(["check", "--log-level", "loud"])
