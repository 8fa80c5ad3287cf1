"""
Structured JSON logging for the comment coverage engine.

Every record is emitted as one JSON object. Analysis context (the file being
checked, its language, the current phase and rule) is promoted to top-level
keys so log pipelines can filter on it; any other ``extra`` values are nested
under ``context``.

Modules obtain a ``ContextLoggerAdapter`` through ``get_logger`` and bind
context once instead of repeating it on every call::

    file_logger = get_logger(__name__).with_context(file_path="src/app.ts")
    file_logger.info("Checking file")
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging import LogRecord
from typing import IO, Any, Dict, Mapping, MutableMapping, Optional, Tuple

CONTEXT_FIELDS = ("file_path", "language", "phase", "rule")

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def _utc_timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JSONFormatter(logging.Formatter):
    """
    Render log records as single-line JSON.

    Keys: ``timestamp``, ``level``, ``logger``, ``message``, the analysis
    context fields that are set, ``context`` for other extras, ``error`` when
    exception info is attached and ``source`` (file, line, function).
    """

    def __init__(self, include_source: bool = True):
        super().__init__()
        self.include_source = include_source

    def format(self, record: LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(self._analysis_fields(record))

        extras = self._extra_fields(record)
        if extras:
            payload["context"] = extras

        if record.exc_info:
            payload["error"] = self._error_block(record)

        if self.include_source:
            payload["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(payload, default=str, ensure_ascii=False)

    @staticmethod
    def _analysis_fields(record: LogRecord) -> Dict[str, Any]:
        return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}

    @staticmethod
    def _extra_fields(record: LogRecord) -> Dict[str, Any]:
        return {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in CONTEXT_FIELDS
        }

    @staticmethod
    def _error_block(record: LogRecord) -> Dict[str, Optional[str]]:
        exc_type, exc_value, exc_tb = record.exc_info
        return {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value is not None else None,
            "stack_trace": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
        }


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter carrying bound analysis context.

    Bound context is merged into every record; values passed in ``extra`` at
    the call site take precedence over bound ones.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Mapping[str, Any]] = None):
        super().__init__(logger, dict(extra or {}))

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """Return a new adapter with ``context`` bound on top of this one's."""
        return ContextLoggerAdapter(self.logger, {**self.extra, **context})


class LogContext:
    """
    Temporarily bind context on an existing adapter.

    Usage:
        with LogContext(logger, file_path="src/app.ts", phase="check"):
            logger.info("Checking file")  # carries file_path and phase
    """

    def __init__(self, logger: logging.LoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self._saved: Optional[Mapping[str, Any]] = None

    def __enter__(self) -> logging.LoggerAdapter:
        self._saved = self.logger.extra
        self.logger.extra = {**(self._saved or {}), **self.context}
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.extra = self._saved
        self._saved = None


def setup_logging(log_level: Optional[str] = None, stream: Optional[IO[str]] = None) -> None:
    """
    Install the JSON handler on the root logger.

    Args:
        log_level: Level name; defaults to the configured ``log_level``
        stream: Output stream; defaults to stdout
    """
    if log_level is None:
        from commentguard.config import settings
        log_level = settings.log_level
    level = log_level.upper()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (typically __name__)
        **context: Context bound to every record (file_path, language, ...)
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)


def log_file_analysis(
    logger: logging.LoggerAdapter,
    file_path: str,
    language: Optional[str],
    diagnostic_count: int,
    duration_ms: Optional[float] = None,
) -> None:
    """Log the summary of one analyzed file at INFO."""
    extra: Dict[str, Any] = {
        "file_path": file_path,
        "language": language,
        "diagnostic_count": diagnostic_count,
    }
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    logger.info(f"Analyzed {file_path}: {diagnostic_count} diagnostics", extra=extra)


def log_phase_transition(logger: logging.LoggerAdapter, file_path: str, phase: str, status: str) -> None:
    """Log the start or completion of an analysis phase ('parse', 'check') at DEBUG."""
    logger.debug(
        f"{phase} {status} for {file_path}",
        extra={"file_path": file_path, "phase": phase, "status": status},
    )


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: BaseException,
    **context: Any,
) -> None:
    """
    Log an error with its stack trace.

    Args:
        logger: Logger to use
        message: Error message
        error: The exception being reported
        **context: Analysis context (file_path, language, ...)
    """
    logger.error(message, extra=context, exc_info=(type(error), error, error.__traceback__))
