"""
Log setup for hook runs.

A hook's report is the stdout the host shows to the session, so log records
always go to stderr. CI runs can ask for one JSON object per record, tagged
with the hook and tool that produced it.
"""

import json
import sys
import logging
from datetime import datetime, timezone

# Context callers attach with logger.info(..., extra={...})
EXTRA_FIELDS = ("hook", "tool", "file_path", "exit_code", "duration_ms")

PLAIN_FORMAT = "%(message)s"


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line with its hook context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }
        entry.update({
            key: getattr(record, key)
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


def setup_structured_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """
    Route every log record to stderr.

    Args:
        level: Level name; unknown names fall back to WARNING
        json_output: Emit StructuredFormatter lines instead of bare messages
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
