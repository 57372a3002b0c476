"""Logging setup: human-readable text or one JSON object per line."""

import json
import logging
from datetime import datetime, timezone

# Structured fields passed through `extra=` by the loader, writer and publisher
_EXTRA_FIELDS = ("page", "tags", "path", "attempt", "status", "operation")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "info", fmt: str = "text") -> logging.Handler:
    """Install a single stream handler on the root logger.

    Calling it again replaces the handler installed by the previous call.
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    handler.set_name("scrapbox2notion")

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "scrapbox2notion":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(_LEVELS.get(level.lower(), logging.INFO))

    # urllib3 retry chatter is only useful when debugging
    if root.level > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
    return handler
