import datetime
from decimal import Decimal
from enum import Enum
import json
import logging
from typing import Any
import uuid

from asgi_correlation_id import CorrelationIdFilter
from kp_case_matcher.utils.constants import LOG_SOURCE

# Atributos estándar de LogRecord que no se reportan como "extra"
_RECORD_ATTRS = frozenset([
    "msg", "name", "args", "module", "message", "asctime", "lineno", "thread",
    "threadName", "levelno", "levelname", "funcName", "pathname", "filename",
    "exc_info", "exc_text", "stack_info", "processName", "process",
    "relativeCreated", "created", "msecs", "taskName", "correlation_id",
])

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class CustomFormatter(logging.Formatter):
    def format(self, record):
        record.correlation_id_str = f"[{record.correlation_id}]" if getattr(record, "correlation_id", None) is not None else ""
        msg = super().format(record)
        extra_info = " ".join(
            f"{k}={v}" for k, v in record.__dict__.items()
            if k not in _RECORD_ATTRS and k != "correlation_id_str"
        )
        if extra_info:
            msg = f"{msg} ({extra_info})"
        return msg


class CustomJSONEncoder(json.JSONEncoder):
    """JSON encoder for the values that show up in matcher log extras."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.name
        if isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        if callable(obj):
            return getattr(obj, "__qualname__", repr(obj))
        return super().default(obj)


class JSONFormatter(logging.Formatter):
    """A formatter that outputs one JSON object per log line."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.datetime.fromtimestamp(record.created).astimezone()
        # YYYY-MM-DD HH:MM:SS.microseconds+TZOFFSET
        return dt.strftime("%Y-%m-%d %H:%M:%S.%f%z")

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if getattr(record, "correlation_id", None) is not None:
            log_data["correlation_id"] = record.correlation_id

        if record.exc_info:
            import traceback

            exc_type, exc_value, exc_traceback = record.exc_info
            log_data["exc_info"] = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
        else:
            log_data["exc_info"] = None

        if getattr(record, "extra", None):
            log_data.update(record.extra)

        extra_info = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS and k != "extra"}
        if extra_info:
            log_data.update(extra_info)
        return json.dumps(log_data, cls=CustomJSONEncoder)


logger = logging.getLogger(LOG_SOURCE)
logger.setLevel(logging.INFO)
logger.addFilter(CorrelationIdFilter())
handler = logging.StreamHandler()
# Fuera de una request no hay correlation_id
formatter = CustomFormatter('%(name)s - %(levelname)s - %(correlation_id_str)s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)


def setup_logger_json(
    level: str,
    module_name: str,
) -> logging.Logger:
    """Configure and return a JSON logger for the specified module.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        module_name: Name of the module requesting the logger

    Returns:
        logging.Logger: Configured logger instance
    """
    if level not in _LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")

    json_logger = logging.getLogger(f"{LOG_SOURCE}.{module_name}")
    json_logger.handlers.clear()
    json_logger.setLevel(_LEVELS[level])
    # Evita duplicar cada línea en el handler del logger raíz del paquete
    json_logger.propagate = False

    json_logger.addFilter(CorrelationIdFilter())

    console_handler = logging.StreamHandler()
    console_handler.setLevel(_LEVELS[level])
    console_handler.setFormatter(JSONFormatter())
    json_logger.addHandler(console_handler)

    return json_logger

