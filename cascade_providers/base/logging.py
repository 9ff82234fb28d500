"""Base structured logging utilities for the cascade client.

Rationale:
- Central place to configure consistent JSON (or plain) logging.
- Avoid ad-hoc logger setup in the adapter, retry and cascade modules.

Every module obtains its logger through :func:`get_logger`; child loggers
propagate to the shared ``cascade`` logger, which owns the only console
handler. The level can be overridden with ``CASCADE_LOG_LEVEL``.

Events are emitted with :func:`log_event` as single-line JSON payloads.
:func:`normalized_log_event` adds the canonical keys (``phase``, ``attempt``,
``error_code``) shared by all cascade events.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext


BASE_LOGGER_NAME = "cascade"
LEVEL_ENV_VAR = "CASCADE_LOG_LEVEL"

_BASE_LOGGER_ATTR = "_cascade_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_cascade_console_handler"
_FILE_HANDLER_ATTR = "_cascade_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_KEY_PARAM = re.compile(r"([?&]key=)[^&\s\"']+")


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level string into an integer constant.

    Accepts common names (DEBUG, INFO, WARNING, ERROR, CRITICAL) case-insensitively.
    Falls back to ``default`` on unknown values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize and return the shared ``cascade`` logger."""

    logger = logging.getLogger(BASE_LOGGER_NAME)
    desired_level = _parse_level(os.getenv(LEVEL_ENV_VAR), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        if logger.level != desired_level:
            logger.setLevel(desired_level)
            for h in logger.handlers:
                h.setLevel(desired_level)
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired_level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger wired to the shared ``cascade`` handler.

    Names outside the ``cascade.`` hierarchy are nested under it so records
    always reach the managed handler exactly once.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    if not name.startswith(f"{BASE_LOGGER_NAME}."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``cascade`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired logging level, numeric or by name. ``None`` keeps the current level.
    file_path: Optional[str]
        When provided, a rotating file handler writing to ``file_path`` is
        attached (or reused). When ``None``, a previously attached managed file
        handler is removed.
    json_mode: bool
        Formatter used for the console handler and any file handler.

    Returns
    -------
    logging.Logger
        The configured base logger. Handlers not created by this module are
        left untouched.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)

    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level) if isinstance(level, str) else level)
    for h in logger.handlers:
        h.setLevel(logger.level)
        if getattr(h, _CONSOLE_HANDLER_ATTR, False):
            h.setFormatter(_formatter(json_mode))

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in managed:
        if abs_path is not None and getattr(h, "baseFilename", None) == abs_path:
            h.setFormatter(_formatter(json_mode))
            return logger
        logger.removeHandler(h)
        with contextlib.suppress(OSError):
            h.close()
    if abs_path is None:
        return logger

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    # Rotate at 10MB, keep 5 backups.
    fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(fh, _FILE_HANDLER_ATTR, True)
    fh.setLevel(logger.level)
    fh.setFormatter(_formatter(json_mode))
    logger.addHandler(fh)
    return logger


def redact(text: str) -> str:
    """Mask ``key=`` query parameters so credentials never reach a log line."""
    return _KEY_PARAM.sub(r"\1***", text)


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured log event.

    Parameters
    ----------
    logger: logging.Logger
        Logger obtained from :func:`get_logger`.
    event: str
        Event name (e.g. ``cascade.skip``).
    ctx: LogContext | None
        Provider/model context; merged shallowly.
    level: int
        Logging level of the emitted record.
    keep_none: bool
        Preserve keys whose values are ``None`` instead of dropping them.
    **fields: Any
        JSON-serializable key/value pairs.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, redact(json.dumps(payload, ensure_ascii=False, default=str)))


REQUIRED_NORMALIZED_KEYS = ("phase", "attempt", "error_code")


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a log event carrying the canonical cascade keys.

    ``phase`` and ``attempt`` are always present (``attempt`` may be ``null``);
    ``error_code`` is omitted when ``None``. Extra fields never overwrite the
    canonical ones.
    """
    base_fields: Dict[str, Any] = {"phase": phase, "attempt": attempt}
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "redact",
    "REQUIRED_NORMALIZED_KEYS",
]
