"""Tests for the web service entry point."""

from pathlib import Path

import pytest

from forexa.web import main as web_main


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, object]:
    calls: dict[str, object] = {}
    monkeypatch.setenv("FOREXA_CONFIG", str(tmp_path / "missing.toml"))
    for name in ("FOREXA_RELOAD", "FOREXA_PORT", "PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("FOREXA_LOG_FILE", raising=False)
    monkeypatch.delenv("FOREXA_LOGGING_LEVEL", raising=False)
    monkeypatch.setattr(web_main, "configure_logging", lambda **kwargs: calls.update(logging=kwargs))
    monkeypatch.setattr(web_main.uvicorn, "run", lambda app, **kwargs: calls.update(app=app, run=kwargs))
    return calls


def test_main_applies_log_file(captured, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    log_file = str(tmp_path / "forexa.jsonl")
    monkeypatch.setenv("FOREXA_LOG_FILE", log_file)
    monkeypatch.setenv("FOREXA_LOGGING_LEVEL", "DEBUG")

    web_main.main()

    assert captured["logging"] == {"level": "DEBUG", "file_output": True, "file_path": log_file}


def test_main_without_log_file_logs_to_console_only(captured) -> None:
    web_main.main()

    assert captured["logging"]["file_output"] is False
    assert captured["logging"]["file_path"] is None
    assert captured["run"]["port"] == 3000
