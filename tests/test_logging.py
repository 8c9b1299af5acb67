#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for the structured log formatter.
"""
import json
import logging

from core.logging import StructuredFormatter, get_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("importer", logging.INFO, __file__, 10, "Import finished", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_carries_extras():
    payload = json.loads(
        StructuredFormatter().format(_record(correlation_id="1a2b3c4d", auction_id="x1", mode="created"))
    )

    assert payload["message"] == "Import finished"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "1a2b3c4d"
    assert payload["extra"] == {"auction_id": "x1", "mode": "created"}


def test_structured_formatter_without_extras():
    payload = json.loads(StructuredFormatter().format(_record()))
    assert "correlation_id" not in payload
    assert "extra" not in payload


def test_get_logger_console_only():
    logger = get_logger("test-logger", log_level="DEBUG", enable_file=False)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False
