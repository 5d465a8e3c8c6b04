"""Root logging for the label station: console lines or one JSON object per line."""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_PLAIN_FIELDS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class _JsonLines(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {"level": record.levelname, "logger": record.name, "message": record.getMessage()}
        # label_id=... and friends passed through ``extra``
        payload.update((k, v) for k, v in vars(record).items() if k not in _PLAIN_FIELDS)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    level = level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {"format": CONSOLE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": _JsonLines},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "plain",
                    "level": level,
                }
            },
            "root": {"handlers": ["stderr"], "level": level},
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
