"""Unit tests for the process entry point."""

from __future__ import annotations

import logging

import pytest

import relay.main as main_mod


def test_bind_failure_is_logged_and_exits(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    def _fail_to_bind(*args, **kwargs) -> None:
        raise SystemExit(1)

    monkeypatch.setattr(main_mod, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(main_mod.uvicorn, "run", _fail_to_bind)

    with caplog.at_level(logging.INFO, logger="relay.main"):
        with pytest.raises(SystemExit) as excinfo:
            main_mod.main()

    assert excinfo.value.code == 1
    failures = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert failures and "failed to start" in failures[0].getMessage()
    assert not any("shut down gracefully" in r.getMessage() for r in caplog.records)


def test_clean_exit_logs_shutdown(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(main_mod, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(main_mod.uvicorn, "run", lambda *args, **kwargs: None)

    with caplog.at_level(logging.INFO, logger="relay.main"):
        main_mod.main()

    assert any("shut down gracefully" in r.getMessage() for r in caplog.records)
    assert not any(r.levelno >= logging.ERROR for r in caplog.records)
