"""Tests for logging setup."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest
import structlog

from grapes_translator.core.logging import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("grapes_translator").setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_level_from_env(self, restore_logging):
        with patch.dict(os.environ, {"GRAPES_LOG_LEVEL": "debug"}):
            setup_logging()
        assert logging.getLogger("grapes_translator").level == logging.DEBUG

    def test_default_level(self, restore_logging):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GRAPES_LOG_LEVEL", None)
            setup_logging()
        assert logging.getLogger("grapes_translator").level == logging.INFO

    def test_json_renderer(self, restore_logging):
        with patch.dict(os.environ, {"GRAPES_LOG_FORMAT": "json"}):
            setup_logging()
        formatter = next(
            h.formatter
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        )
        assert any(
            isinstance(p, structlog.processors.JSONRenderer) for p in formatter.processors
        )
        assert structlog.is_configured()
