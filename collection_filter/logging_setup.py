"""JSONL log file for CLI runs.

Each record becomes one JSON object per line. Fields passed through
``extra=`` (and dict messages) are merged into the object, so a filter run
can be replayed from the log.

Environment:
- COLLECTION_FILTER_LOG_PATH: log file (default ./collection-filter.log.jsonl)
- COLLECTION_FILTER_LOG_LEVEL: root level (default INFO)

Setting either variable enables the log without any CLI flag.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import Any

PATH_ENV = "COLLECTION_FILTER_LOG_PATH"
LEVEL_ENV = "COLLECTION_FILTER_LOG_LEVEL"
FALLBACK_PATH = "./collection-filter.log.jsonl"
FALLBACK_LEVEL = "INFO"

# Attributes every LogRecord carries; anything else came from extra=.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonlFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def to_dict(self, record: logging.LogRecord) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if isinstance(record.msg, dict):
            entry.update(record.msg)
        for key, value in vars(record).items():
            if key not in _STANDARD_ATTRS:
                entry.setdefault(key, value)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return entry

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self.to_dict(record), ensure_ascii=False, default=str)


class JsonlHandler(logging.FileHandler):
    """Append JSON lines to a file, creating its directory on first use."""

    def __init__(self, path: str | Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(path, mode="a", encoding="utf-8", delay=True)
        self.setFormatter(JsonlFormatter())


def json_logging_requested() -> bool:
    """Return True if the environment asks for the JSONL log."""
    return bool(os.environ.get(PATH_ENV) or os.environ.get(LEVEL_ENV))


def init_json_logging(path: str | None = None, level: str | None = None) -> JsonlHandler:
    """Route root logging to a JSONL file, replacing an earlier JSONL handler.

    Explicit arguments win over the environment.
    """
    path = path or os.environ.get(PATH_ENV) or FALLBACK_PATH
    level = (level or os.environ.get(LEVEL_ENV) or FALLBACK_LEVEL).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    for existing in [h for h in root.handlers if isinstance(h, JsonlHandler)]:
        root.removeHandler(existing)
        existing.close()

    handler = JsonlHandler(path)
    root.addHandler(handler)
    return handler
