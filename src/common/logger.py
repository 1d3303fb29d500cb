"""
Logging setup for the API process and session-scoped loggers for routes.

`setup_logging` is called once by the app; everything else logs through
`logging.getLogger(__name__)` or, where a request belongs to an upload
session, through `get_logger(__name__, session_id=..., component=...)`.
"""

import json
import logging
import sys
from typing import Any, MutableMapping, Optional, Tuple

SIMPLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; the message is escaped, not interpolated."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class SessionLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with `[session:<first 8 chars>] [component]`."""

    def __init__(self, logger: logging.Logger, session_id: Optional[str] = None, component: Optional[str] = None):
        super().__init__(logger, {"session_id": session_id, "component": component})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        prefix = []
        if self.extra.get("session_id"):
            prefix.append(f"[session:{self.extra['session_id'][:8]}]")
        if self.extra.get("component"):
            prefix.append(f"[{self.extra['component']}]")
        if prefix:
            msg = f"{' '.join(prefix)} {msg}"
        return msg, kwargs


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Route all records to stdout at `level`.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR); unknown names mean INFO
        format: "simple" for human-readable lines, "json" for one object per line
    """
    handler = logging.StreamHandler(sys.stdout)
    if format == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str, session_id: Optional[str] = None, component: Optional[str] = None) -> SessionLogAdapter:
    return SessionLogAdapter(logging.getLogger(name), session_id=session_id, component=component)
