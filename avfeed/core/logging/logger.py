"""Structured JSON logging on top of loguru.

Every line carries a ``trace_id``. :func:`log_context` scopes a fresh trace id
and request metadata (symbol, endpoint, ...) to a block, so all lines written
while one history or quote request runs can be correlated.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger

from avfeed.core.logging.config import LogConfig

_trace_id: ContextVar[str | None] = ContextVar("avfeed_trace_id", default=None)
_request_fields: ContextVar[dict[str, Any]] = ContextVar("avfeed_request_fields", default={})


def current_trace_id() -> str:
    """Return the active trace id, starting one if none is active."""

    trace_id = _trace_id.get()
    if trace_id is None:
        trace_id = uuid4().hex
        _trace_id.set(trace_id)
    return trace_id


def _patch(record: dict[str, Any]) -> None:
    extra = record["extra"]
    if not extra.get("trace_id"):
        extra["trace_id"] = current_trace_id()
    # explicit keyword arguments win over the surrounding request fields
    for name, value in _request_fields.get().items():
        if extra.get(name) is None:
            extra[name] = value


def _encode(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _to_payload(record: dict[str, Any], promoted: tuple[str, ...]) -> dict[str, Any]:
    extra = dict(record["extra"])
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": extra.pop("logger_name", None) or record["name"],
        "message": record["message"],
        "trace_id": extra.pop("trace_id", None),
        "error_code": extra.pop("error_code", None),
    }
    for name in promoted:
        payload[name] = extra.pop(name, None)
    if extra:
        payload["context"] = extra
    exception = record["exception"]
    if exception is not None and exception.type is not None:
        payload["exception"] = f"{exception.type.__name__}: {exception.value}"
    return payload


class _JsonLineSink:
    """Write one JSON object per record to a text stream or append it to a file."""

    def __init__(self, target: IO[str] | Path, promoted: tuple[str, ...]) -> None:
        self._target = target
        self._promoted = promoted
        if isinstance(target, Path):
            target.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        line = json.dumps(_to_payload(message.record, self._promoted), default=_encode) + "\n"
        if isinstance(self._target, Path):
            with self._target.open("a", encoding="utf-8") as handle:
                handle.write(line)
        else:
            self._target.write(line)
            self._target.flush()


def configure_logging(level: str = "INFO", **options: Any) -> LogConfig:
    """Replace every loguru handler with avfeed's JSON sinks."""

    config = LogConfig(level=level, **options)
    targets: list[IO[str] | Path] = []
    if config.console_output:
        targets.append(config.console_stream or sys.stderr)
    if config.file_path:
        targets.append(Path(config.file_path).expanduser())

    logger.configure(
        handlers=[{"sink": _JsonLineSink(target, config.promoted_fields), "level": config.level} for target in targets],
        patcher=_patch,
        extra=dict(config.extra),
    )
    return config


def get_logger(name: str | None = None) -> Any:
    """Return the loguru logger, bound to ``name`` when given."""

    return logger.bind(logger_name=name) if name else logger


def bind(**fields: Any) -> Any:
    return logger.bind(**fields)


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Tag every line written inside the block with ``fields`` and one trace id.

    Nested blocks inherit the outer fields. A new trace id is started unless
    ``trace_id`` is given; the block yields the id in use.
    """

    active = trace_id or uuid4().hex
    trace_token = _trace_id.set(active)
    fields_token = _request_fields.set({**_request_fields.get(), **fields})
    try:
        yield active
    finally:
        _request_fields.reset(fields_token)
        _trace_id.reset(trace_token)


configure_logging()


__all__ = [
    "bind",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
]
