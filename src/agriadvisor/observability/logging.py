"""Log formatting for the advisory service.

Production output is one JSON object per line. A request's id rides in a
ContextVar, so the generate, translate and render steps of one advisory
share the same `correlation_id` without it being passed around. Farm and
pipeline context (user, language, endpoint, step, timing) is attached with
`extra=` and copied into the line when present.
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

EXTRA_FIELDS = ("user_id", "language", "endpoint", "step", "duration_ms")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Client libraries that log every request at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "aiosqlite")


def get_correlation_id() -> str:
    """Id of the request being handled; empty outside a request."""
    return correlation_id.get()


class JSONFormatter(logging.Formatter):
    """One JSON object per record, non-ASCII text kept as-is."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = correlation_id.get()
        if cid:
            entry["correlation_id"] = cid
        entry.update(
            (name, getattr(record, name))
            for name in EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        # Translated advisories are logged in their own script
        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(json_format: bool = True, level: str = "INFO") -> None:
    """Install a single stderr handler on the root logger.

    Args:
        json_format: JSON lines when True, `TEXT_FORMAT` otherwise.
        level: Root level name; unknown names fall back to INFO.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
