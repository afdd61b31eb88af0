"""Log sink configuration.

Every sink writes one JSON object per line containing ``level``,
``message``, ``timestamp``, ``logger`` and any structured fields passed via
``extra=``. Handlers are attached to the ``assetvault`` logger only, so the
host application's root logging is left alone.

Modes:
    - console: stderr
    - file: appended to ``file_path`` (parent directory is created)
    - cloud: stderr, tagged ``"cloud": true`` for integrators to replace
    - none: discard

Examples:
    >>> configure_logging("console", level="INFO")
    >>> logging.getLogger("assetvault.assets").info("hello", extra={"event": "X"})
    {"level": "info", "message": "hello", "timestamp": "...", "logger": "assetvault.assets", "event": "X"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "assetvault"

# Attributes every LogRecord has; anything else came from ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


class JsonLineFormatter(logging.Formatter):
    """Render records as single-line JSON."""

    def __init__(self, static_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields = static_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "logger": record.name,
        }
        payload.update(self.static_fields)
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(
    mode: str,
    file_path: str | None = None,
    level: str = "INFO",
) -> logging.Logger:
    """Install the sink for ``mode`` on the ``assetvault`` logger.

    Args:
        mode: console, file, cloud or none.
        file_path: Required for file mode.
        level: Minimum level name.

    Returns:
        The configured ``assetvault`` logger.

    Raises:
        ValueError: Unknown mode, or file mode without a path.
    """
    mode = getattr(mode, "value", mode)
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if mode == "none":
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        return logger

    if mode == "console":
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLineFormatter())
    elif mode == "file":
        if not file_path:
            raise ValueError("File logger requires LOG_FILE")
        path = Path(file_path).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        handler.setFormatter(JsonLineFormatter())
    elif mode == "cloud":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLineFormatter(static_fields={"cloud": True}))
    else:
        raise ValueError(f"Unknown logger mode: {mode}")

    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger
