"""Logging setup for applications embedding the converter.

The conversion core only ever calls ``logging.getLogger(__name__)``; it
never installs handlers.  Front ends (CLI, web service, batch jobs) call
:func:`setup_logging` once to get:
    - Console and/or file handlers, optional size- or time-based rotation
    - Human-readable or JSON-lines output
    - Contextual fields (``document=logo.svg``) appended to every record
    - ``GeometryWarning`` and other Python warnings routed into logging
    - Optional logging of uncaught exceptions

Format examples:
    Human: 2026-03-02T09:15:04.120Z | INFO     | document=logo.svg | Converted 3 element(s)
    JSON:  {"t": "2026-03-02T09:15:04.120000+00:00", "lvl": "INFO", "document": "logo.svg", "msg": "..."}

Context lives in a ``contextvars.ContextVar`` so concurrent conversions in
threads or asyncio tasks keep separate fields.  Repeated ``setup_logging``
calls replace the handlers installed here instead of duplicating them;
handlers added by anything else are left alone.
"""

import contextlib
import contextvars
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

_context_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "svg_motion_logging_context", default={}
)

_installed_handlers: List[logging.Handler] = []

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ContextFormatter(logging.Formatter):
    """Formatter that appends the current context fields.

    Parameters
    ----------
    fmt_mode : str
        ``"human"`` or ``"json"``.
    use_color : bool
        ANSI level colours (only honoured when stderr is a TTY).
    tz : str
        ``"UTC"`` or ``"local"`` timestamps.
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True, tz: str = "UTC"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown log format: {fmt_mode!r}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()
        self.tz = tz

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        if self.tz == "UTC":
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        else:
            ts = datetime.fromtimestamp(record.created)

        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        entry = {
            "t": ts.isoformat(),
            "lvl": record.levelname,
            "name": record.name,
            "pid": os.getpid(),
            "msg": record.getMessage(),
        }
        entry.update(context)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)

    def _format_human(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_COLORS.get(record.levelname, '')}{level}{_RESET}"

        parts = [ts_str, "|", level, "|"]
        if context:
            parts.append(" ".join(f"{k}={v}" for k, v in context.items()))
            parts.append("|")
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    rotate: Optional[Dict[str, Any]] = None,
    tz: str = "UTC",
    capture_warnings: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    log_level : str
        ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"`` or ``"CRITICAL"``.
    log_file : str, optional
        Also log to this file (directories are created).
    json : bool
        JSON-lines format for the file handler.
    color : bool
        ANSI colours on the console handler.
    to_stderr : bool
        Attach a console handler.
    rotate : dict, optional
        ``{"mode": "size", "max_bytes": ..., "backup_count": ...}`` or
        ``{"mode": "time", "when": "D", "interval": 1, "backup_count": ...}``.
    tz : str
        ``"UTC"`` (default) or ``"local"``.
    capture_warnings : bool
        Route :mod:`warnings` (e.g. ``GeometryWarning``) into logging.
    quiet_libs : list[str], optional
        Logger names forced to WARNING.
    context : dict, optional
        Initial context fields, e.g. ``{"app": "svg2gcode"}``.

    Returns
    -------
    list[logging.Handler]
        The handlers that were installed.
    """
    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root.setLevel(getattr(logging, log_level.upper()))

    handlers: List[logging.Handler] = []
    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", color, tz))
        handlers.append(console)
    if log_file:
        handlers.append(_create_file_handler(log_file, rotate, json, tz))

    for handler in handlers:
        root.addHandler(handler)
    _installed_handlers.extend(handlers)

    if context:
        push_context(**context)

    for lib in quiet_libs or []:
        logging.getLogger(lib).setLevel(logging.WARNING)

    if capture_warnings:
        route_warnings()

    return handlers


def _create_file_handler(
    log_file: str,
    rotate: Optional[Dict[str, Any]],
    json_format: bool,
    tz: str,
) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    if rotate:
        mode = rotate.get("mode", "size")
        if mode == "size":
            handler: logging.Handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=rotate.get("max_bytes", 10_000_000),
                backupCount=rotate.get("backup_count", 5),
            )
        elif mode == "time":
            handler = logging.handlers.TimedRotatingFileHandler(
                log_file,
                when=rotate.get("when", "D"),
                interval=rotate.get("interval", 1),
                backupCount=rotate.get("backup_count", 7),
            )
        else:
            raise ValueError(f"Unknown rotation mode: {mode}. Use 'size' or 'time'.")
    else:
        handler = logging.FileHandler(log_file)

    handler.setFormatter(
        ContextFormatter("json" if json_format else "human", use_color=False, tz=tz)
    )
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Change the root logger level at runtime."""
    logging.getLogger().setLevel(getattr(logging, level.upper()))


def get_context() -> Dict[str, Any]:
    """Copy of the current context fields."""
    return dict(_context_var.get())


def push_context(**kwargs: Any) -> None:
    """Add fields to every subsequent record in this context.

    Examples
    --------
    >>> push_context(document="logo.svg")
    >>> logger.info("Parsed")  # -> "... | document=logo.svg | Parsed"
    """
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove *keys* from the context, or clear it when *keys* is ``None``."""
    if keys is None:
        _context_var.set({})
        return
    remaining = {k: v for k, v in _context_var.get().items() if k not in keys}
    _context_var.set(remaining)


@contextlib.contextmanager
def logging_context(**kwargs: Any) -> Iterator[None]:
    """Scope context fields to a ``with`` block, restoring the previous set."""
    token = _context_var.set({**_context_var.get(), **kwargs})
    try:
        yield
    finally:
        _context_var.reset(token)


def install_excepthook() -> None:
    """Log uncaught exceptions (except Ctrl+C) at CRITICAL before exiting."""

    def log_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger(__name__).critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_exception


def route_warnings() -> None:
    """Send Python warnings to the ``py.warnings`` logger."""
    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.WARNING)


def shutdown() -> None:
    """Flush and close all handlers."""
    logging.shutdown()
