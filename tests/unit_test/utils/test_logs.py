import datetime
from decimal import Decimal
import enum
import json
import logging
import sys
import uuid
from unittest.mock import Mock

import pytest

from kp_case_matcher.utils.logs import (
    CustomFormatter,
    CustomJSONEncoder,
    JSONFormatter,
    setup_logger_json,
    CorrelationIdFilter
)


def _record(msg="dispatcher compiled", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="kp_case_matcher.case_matcher.factory",
        level=level,
        pathname="factory.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestCorrelationIdFilter:

    def test_correlation_id_filter_accepts_records(self):
        assert CorrelationIdFilter().filter(Mock()) is True


class TestCustomFormatter:
    """Tests for CustomFormatter."""

    def test_format_with_correlation_id(self):
        formatter = CustomFormatter('%(name)s - %(levelname)s - %(correlation_id_str)s %(message)s')
        record = _record()
        record.correlation_id = "req-1"

        result = formatter.format(record)

        assert "[req-1]" in result
        assert "dispatcher compiled" in result

    def test_format_without_correlation_id(self):
        formatter = CustomFormatter('%(correlation_id_str)s%(message)s')
        record = _record()

        result = formatter.format(record)

        assert result.startswith("dispatcher compiled")
        assert record.correlation_id_str == ""

    def test_format_appends_matcher_extras(self):
        formatter = CustomFormatter('%(message)s')
        record = _record()
        record.matcher = "sign"
        record.total_cases = 3

        result = formatter.format(record)

        assert result.startswith("dispatcher compiled (")
        assert "matcher=sign" in result
        assert "total_cases=3" in result


class TestCustomJSONEncoder:
    """Tests for CustomJSONEncoder."""

    def test_encode_uuid(self):
        test_uuid = uuid.uuid4()
        assert CustomJSONEncoder().default(test_uuid) == str(test_uuid)

    def test_encode_decimal(self):
        assert CustomJSONEncoder().default(Decimal("1.5")) == 1.5

    def test_encode_datetime(self):
        dt = datetime.datetime(2024, 1, 15, 10, 30, 45)
        assert CustomJSONEncoder().default(dt) == "2024-01-15T10:30:45"

    def test_encode_enum_by_name(self):
        class Shape(enum.Enum):
            SQUARE = 1

        assert CustomJSONEncoder().default(Shape.SQUARE) == "SQUARE"

    def test_encode_tuple_and_frozenset(self):
        assert CustomJSONEncoder().default(("a", "b")) == ["a", "b"]
        assert CustomJSONEncoder().default(frozenset(["a"])) == ["a"]

    def test_encode_callable_by_qualname(self):
        def handler(n):
            return n

        assert CustomJSONEncoder().default(handler).endswith("handler")

    def test_encode_unsupported_type(self):
        with pytest.raises(TypeError):
            CustomJSONEncoder().default(object())


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format_time(self):
        result = JSONFormatter().formatTime(_record())
        assert "-" in result
        assert ":" in result

    def test_format_basic_log(self):
        log_data = json.loads(JSONFormatter().format(_record()))

        assert log_data["logger"] == "kp_case_matcher.case_matcher.factory"
        assert log_data["level"] == "INFO"
        assert log_data["message"] == "dispatcher compiled"
        assert "timestamp" in log_data
        assert log_data["exc_info"] is None
        assert "correlation_id" not in log_data

    def test_format_with_correlation_id(self):
        record = _record()
        record.correlation_id = "req-1"

        log_data = json.loads(JSONFormatter().format(record))

        assert log_data["correlation_id"] == "req-1"

    def test_format_with_exception(self):
        try:
            raise LookupError("Referenced undefined case name: zero")
        except LookupError:
            exc_info = sys.exc_info()

        log_data = json.loads(JSONFormatter().format(_record("dispatch failed", logging.ERROR, exc_info)))

        assert log_data["level"] == "ERROR"
        assert "LookupError" in log_data["exc_info"]
        assert "undefined case name: zero" in log_data["exc_info"]

    def test_format_with_extra_dict(self):
        record = _record()
        record.extra = {"matcher": "sign"}

        log_data = json.loads(JSONFormatter().format(record))

        assert log_data["matcher"] == "sign"

    def test_format_with_trace_fields(self):
        record = _record("dispatched sign.abs to case zero", logging.DEBUG)
        record.path = "sign.abs"
        record.case = "zero"
        record.kwarg_names = ("factor",)

        log_data = json.loads(JSONFormatter().format(record))

        assert log_data["path"] == "sign.abs"
        assert log_data["case"] == "zero"
        assert log_data["kwarg_names"] == ["factor"]


class TestSetupLoggerJson:
    """Tests for setup_logger_json function."""

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    def test_setup_logger_levels(self, level):
        logger = setup_logger_json(level=level, module_name=f"test_module_{level.lower()}")

        assert logger.name == f"kp_case_matcher.test_module_{level.lower()}"
        assert logger.level == getattr(logging, level)
        assert logger.propagate is False

    def test_setup_logger_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logger_json(level="VERBOSE", module_name="test_bad_level")

    def test_setup_logger_clears_handlers(self):
        logger = setup_logger_json(level="INFO", module_name="test_clear_handlers")
        initial_handler_count = len(logger.handlers)

        logger = setup_logger_json(level="INFO", module_name="test_clear_handlers")

        assert len(logger.handlers) == initial_handler_count

    def test_setup_logger_has_json_formatter(self):
        logger = setup_logger_json(level="INFO", module_name="test_json_formatter")
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logger_has_correlation_id_filter(self):
        logger = setup_logger_json(level="INFO", module_name="test_correlation_filter")
        assert any(isinstance(f, CorrelationIdFilter) for f in logger.filters)
