from __future__ import annotations

import logging

import pytest

from harmonipy.common import configure_logging


def test_configure_logging_reads_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HARMONIPY_LOG_LEVEL", "debug")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_explicit_level_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HARMONIPY_LOG_LEVEL", "DEBUG")

    configure_logging(level=logging.ERROR, force=True)

    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("hishel").level == logging.ERROR


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="LOUD"):
        configure_logging(level="LOUD", force=True)
