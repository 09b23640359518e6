from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from agent_runtime.core.config import Settings, get_settings
from agent_runtime.core.logging_config import LOG_FILE_NAME, get_logger, setup_logging


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("AGENT_RUNTIME_LOG_LEVEL", "AGENT_RUNTIME_COST_CURRENCY", "AGENT_RUNTIME_MAX_STEPS"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.log_level == "INFO"
    assert s.cost_currency == "USD"
    assert s.max_steps == 100
    assert s.enable_file_logging is False


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENT_RUNTIME_MAX_STEPS", "7")
    monkeypatch.setenv("AGENT_RUNTIME_COST_CURRENCY", "EUR")
    s = Settings(_env_file=None)
    assert s.max_steps == 7
    assert s.cost_currency == "EUR"


def test_settings_require_a_step_limit() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_steps=None)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_steps=0)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


@pytest.fixture
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_configures_console_handler(_restore_root_logger) -> None:
    setup_logging(log_level="warning", log_format="simple", enable_file=False)

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].level == logging.WARNING
    assert logging.getLogger("agent_runtime.policy").level == logging.DEBUG


def test_setup_logging_writes_file_when_enabled(_restore_root_logger, tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("AGENT_RUNTIME_LOG_FILE_DIR", str(tmp_path / "logs"))
    get_settings.cache_clear()

    setup_logging(log_format="json", enable_file=True)

    assert (tmp_path / "logs" / LOG_FILE_NAME).exists()


def test_get_logger_returns_named_logger() -> None:
    assert get_logger("agent_runtime.usage").name == "agent_runtime.usage"
