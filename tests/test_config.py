"""Tests for configuration and logging setup."""

import logging

import pytest

from hebe.config import DEFAULT_CLUSTER, HebeConfig, get_config, set_config
from hebe.logging_config import configure_logging, setup_logging


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEBE_CLUSTER", "es01:9200")
    monkeypatch.setenv("HEBE_TIMEOUT", "2.5")
    monkeypatch.setenv("HEBE_PROXY", "http://proxy:3128")
    monkeypatch.setenv("HEBE_INSECURE", "yes")
    monkeypatch.setenv("HEBE_DEBUG", "0")

    config = HebeConfig.from_env()

    assert config.cluster == "es01:9200"
    assert config.timeout == 2.5
    assert config.proxy == "http://proxy:3128"
    assert config.insecure is True
    assert config.debug is False


def test_defaults_and_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HEBE_CLUSTER", "HEBE_PROXY", "HEBE_INSECURE", "HEBE_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HEBE_TIMEOUT", "soon")

    config = HebeConfig.from_env()

    assert config.cluster == DEFAULT_CLUSTER
    assert config.timeout == 30.0
    assert config.proxy == ""


def test_get_config_reloads_after_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEBE_CLUSTER", "reloaded:9200")
    set_config(None)

    assert get_config().cluster == "reloaded:9200"
    assert get_config() is get_config()


def test_setup_logging_writes_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "hebe.log"
    logger = setup_logging(level="DEBUG", log_file=str(log_file), enable_console=False, enable_file=True)

    logging.getLogger("hebe.tests").debug("written to file", extra={"cluster": "es01:9200"})
    for handler in logger.handlers:
        handler.flush()

    line = log_file.read_text().strip()
    assert "written to file" in line
    assert line.endswith("| cluster=es01:9200")
    assert logger.propagate is False


def test_configure_logging_levels() -> None:
    assert configure_logging(debug=True).level == logging.DEBUG
    assert configure_logging().level == logging.WARNING
