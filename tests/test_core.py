"""
Unit tests for core helpers: pt-BR formatting and structured logging.
"""
import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from app.core.logger import JsonFormatter, get_logger_with_correlation
from app.core.utils import format_brl, format_percent, format_utc_timestamp


@pytest.mark.parametrize("value, expected", [
    (1833.5996, "1.833,60"),
    (0.0, "0,00"),
    (15000, "15.000,00"),
    (1234567.891, "1.234.567,89"),
    (-1234.5, "-1.234,50"),
    (float("nan"), "-"),
])
def test_format_brl(value, expected):
    assert format_brl(value) == expected


def test_format_percent_six_decimals():
    assert format_percent(1.5) == "1,500000"
    assert format_percent(1.0793911) == "1,079391"


def test_format_utc_timestamp():
    naive = datetime(2024, 1, 2, 3, 4, 5)
    brasilia = datetime(2024, 1, 2, 0, 4, 5, tzinfo=timezone(timedelta(hours=-3)))

    assert format_utc_timestamp(naive) == "2024-01-02T03:04:05Z"
    assert format_utc_timestamp(brasilia) == "2024-01-02T03:04:05Z"


def test_json_formatter_includes_correlation_id():
    record = logging.LogRecord("calculadora", logging.INFO, __file__, 1, "Simulation %s", ("ok",), None)
    record.correlation_id = "corr-123"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Simulation ok"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "corr-123"


def test_logger_adapter_carries_correlation_id():
    adapter = get_logger_with_correlation("corr-456")

    assert adapter.extra == {"correlation_id": "corr-456"}
