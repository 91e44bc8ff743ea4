"""Logging setup for the service and for command-line use."""

from __future__ import annotations

import datetime
import json
import logging
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TextIO

REQUEST_ID_METADATA_KEY = "x-request-id"

_LOGGER_NAME = "certident"
_CLI_LOGGER_NAME = "certident.cli"

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}


def _level_name(record: logging.LogRecord) -> str:
    return _LEVEL_NAMES.get(record.levelno, record.levelname)


def _fields(record: logging.LogRecord) -> dict[str, Any]:
    return dict(getattr(record, "fields", None) or {})


class _StdStreamHandler(logging.StreamHandler):
    """Stream handler that always writes to the current sys.stdout/sys.stderr."""

    def __init__(self, stream_getter: Callable[[], TextIO]) -> None:
        self._stream_getter = stream_getter
        super().__init__(stream_getter())

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = self._stream_getter()
        super().emit(record)

    def flush(self) -> None:
        self.stream = self._stream_getter()
        super().flush()


class _ProductionFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "severity": _level_name(record).lower(),
            "ts": record.created,
            "caller": f"{record.filename}:{record.lineno}",
            "message": record.getMessage(),
        }
        entry.update(_fields(record))
        return json.dumps(entry, default=str)


class _DevelopmentFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.datetime.fromtimestamp(record.created).isoformat(
            timespec="milliseconds"
        )
        parts = [
            stamp,
            _level_name(record),
            f"{record.filename}:{record.lineno}",
            record.getMessage(),
        ]
        fields = _fields(record)
        if fields:
            parts.append(json.dumps(fields, default=str))
        return "\t".join(parts)


class _CliFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        fields = _fields(record)
        if fields:
            return f"{message}\t{json.dumps(fields, default=str)}"
        return message


class _FieldLogger(logging.LoggerAdapter):
    """Logger adapter that attaches structured fields to every record."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        fields = {**(self.extra or {}), **extra.get("fields", {})}
        extra["fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def configure_logger(log_type: str) -> logging.Logger:
    """Configure the service logger: "prod" gives JSON on stderr, anything else a
    human-readable debug log on stdout."""
    logger = logging.getLogger(_LOGGER_NAME)
    _reset(logger)
    if log_type == "prod":
        handler = _StdStreamHandler(lambda: sys.stderr)
        handler.setFormatter(_ProductionFormatter())
        logger.setLevel(logging.INFO)
    else:
        handler = _StdStreamHandler(lambda: sys.stdout)
        handler.setFormatter(_DevelopmentFormatter())
        logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def create_cli_logger() -> logging.Logger:
    """Create a logger for command-line output: messages only, on stderr."""
    logger = logging.getLogger(_CLI_LOGGER_NAME)
    _reset(logger)
    handler = _StdStreamHandler(lambda: sys.stderr)
    handler.setFormatter(_CliFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def _metadata_values(
    metadata: Mapping[str, str | Sequence[str]] | None, key: str
) -> list[str]:
    if not metadata:
        return []
    for name, values in metadata.items():
        if name.lower() == key:
            if isinstance(values, str):
                return [values]
            return list(values)
    return []


def context_logger(
    metadata: Mapping[str, str | Sequence[str]] | None = None,
) -> logging.LoggerAdapter:
    """Return the service logger, tagged with the request ID when the incoming
    request metadata carries exactly one."""
    fields: dict[str, Any] = {}
    values = _metadata_values(metadata, REQUEST_ID_METADATA_KEY)
    if len(values) == 1:
        fields["requestID"] = values[0]
    return _FieldLogger(logging.getLogger(_LOGGER_NAME), fields)


logger = configure_logger("dev")
cli_logger = create_cli_logger()