"""
Logging setup for Coloring Printer.

Log lines come from two places: Flask request handlers (print submissions)
and the pause watcher thread. ContextFilter tags each record with a
`context` field: the request id inside a request, otherwise the thread name,
so watcher output is easy to pick out of the journal.
"""

from __future__ import annotations

import json
import logging
import os
import threading

PLAIN_FORMAT = "[%(asctime)s] %(levelname)s %(context)s %(name)s: %(message)s"


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ContextFilter(logging.Filter):
    """
    Attach `context` (request id or thread name) and `path` to every record.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context = None
        path = "-"
        try:
            from flask import g, has_request_context, request  # lazy import

            if has_request_context():
                context = getattr(g, "request_id", None)
                path = request.path
        except Exception:
            pass
        record.context = context or threading.current_thread().name
        record.path = path
        return True


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line: ts, level, logger, context, msg, plus path and exc when present.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "context": getattr(record, "context", record.threadName),
            "msg": record.getMessage(),
        }
        path = getattr(record, "path", "-")
        if path != "-":
            entry["path"] = path
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logging() -> logging.Logger:
    """
    Configure root logging for the application and return the root logger.

    - Level from COLORPRINT_LOG_LEVEL (INFO by default)
    - JSON lines when COLORPRINT_JSON_LOGS is truthy, plain text otherwise
    - systemd's JournalHandler when importable, a StreamHandler otherwise
    - Existing root handlers are replaced so repeated create_app() calls don't duplicate output
    """
    root = logging.getLogger()
    level_name = os.environ.get("COLORPRINT_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.handlers = []

    formatter: logging.Formatter
    if _truthy(os.environ.get("COLORPRINT_JSON_LOGS", "false")):
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)

    try:
        from systemd.journal import JournalHandler  # type: ignore

        handler: logging.Handler = JournalHandler(SYSLOG_IDENTIFIER="coloring-printer")
    except Exception:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    root.addHandler(handler)

    # Let Flask's app logger go through the root handler only
    flask_logger = logging.getLogger("flask.app")
    flask_logger.handlers = []
    flask_logger.propagate = True

    return root


__all__ = ["ContextFilter", "JsonFormatter", "PLAIN_FORMAT", "configure_logging"]
