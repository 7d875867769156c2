from __future__ import annotations

import logging

import pytest
from pythonjsonlogger.json import JsonFormatter

from linked_charts.logging_config import configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_json_is_default(root_logger, monkeypatch):
    monkeypatch.delenv("LINKED_CHARTS_LOG_FORMAT", raising=False)

    configure_logging()

    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)


def test_env_selects_plain(root_logger, monkeypatch):
    monkeypatch.setenv("LINKED_CHARTS_LOG_FORMAT", "PLAIN")

    configure_logging(level=logging.DEBUG)

    formatter = root_logger.handlers[0].formatter
    assert not isinstance(formatter, JsonFormatter)
    assert root_logger.level == logging.DEBUG


def test_force_format_wins_over_env(root_logger, monkeypatch):
    monkeypatch.setenv("LINKED_CHARTS_LOG_FORMAT", "plain")

    configure_logging(force_format="json")

    assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)


def test_level_from_env(root_logger, monkeypatch):
    monkeypatch.setenv("LINKED_CHARTS_LOG_LEVEL", "warning")

    configure_logging(force_format="plain")

    assert root_logger.level == logging.WARNING


def test_unknown_format_is_rejected(root_logger):
    with pytest.raises(ValueError):
        configure_logging(force_format="xml")
