"""JSON logging shared by the API process and the maintenance scripts."""

from __future__ import annotations

import logging
import os
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

_CONFIGURED = False
_LOG_BUFFER: deque[dict[str, Any]] = deque(maxlen=int(os.getenv("LOG_BUFFER_SIZE", "200")))

# Extra fields the services attach with ``logger.info(..., extra={...})``.
_CONTEXT_FIELDS = ("property_id", "query", "error_kind")


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.service = self.service_name
        return True


class _BufferHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, Any] = {
                "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            for key in _CONTEXT_FIELDS:
                value = getattr(record, key, None)
                if value is not None:
                    entry[key] = value
            _LOG_BUFFER.appendleft(entry)
        except Exception:
            # Never break logging for buffer failures
            return


def setup_logging(service_name: Optional[str] = None) -> None:
    """Configure root logging with a JSON formatter and the service name."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    service = service_name or os.getenv("SERVICE_NAME", "property-manager")

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(service)s")
    )
    handler.addFilter(_ServiceNameFilter(service))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.addHandler(_BufferHandler())
    root.setLevel(log_level)
    # httpx logs every request at INFO, which would echo the access key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.captureWarnings(True)
    _CONFIGURED = True


def get_log_buffer(limit: int = 100, level: Optional[str] = None) -> list[dict[str, Any]]:
    """Return the most recent buffered entries, newest first.

    ``level`` keeps entries at or above that level; an unknown name raises ValueError.
    """

    entries = list(_LOG_BUFFER)
    if level:
        threshold = logging.getLevelName(level.upper())
        if not isinstance(threshold, int):
            raise ValueError(f"Unknown log level: {level}")
        entries = [e for e in entries if logging.getLevelName(e["level"]) >= threshold]
    return entries[:limit]


__all__ = ["setup_logging", "get_log_buffer"]
