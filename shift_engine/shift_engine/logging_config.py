"""Logging setup for applications embedding the shift engine.

Library modules only ever call ``logging.getLogger(__name__)``; installing
handlers is left to the host application, which calls
:func:`configure_logging` once at startup.

With ``SHIFT_STRUCTURED_LOGGING=true`` each record is emitted as a single
JSON line::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "INFO",
        "logger": "shift_engine.planner.migration_planner",
        "message": "Planned 3 migration step(s)",
        "step": { ... },          // present when logged with extra={"step": ...}
        "exc_info": "Traceback ..."  // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from shift_engine.config import Settings

TEXT_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Structured migration step context passed via ``extra={"step": ...}``.
        step_data = getattr(record, "step", None)
        if step_data is not None:
            payload["step"] = step_data

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    """Install a root handler according to *settings*.

    ``debug`` forces DEBUG level; otherwise ``log_level`` applies.
    """
    level = logging.DEBUG if settings.debug else logging.getLevelNamesMapping()[settings.log_level]

    if settings.structured_logging:
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        return

    logging.basicConfig(level=level, format=TEXT_FORMAT, force=True)
