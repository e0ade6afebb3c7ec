"""Root logger setup for the API process."""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any

from inventory_api.core.config import Settings, get_settings

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def __init__(self, service: str = "inventory-api", **kwargs: Any):
        super().__init__(**kwargs)
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "service": self.service,
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def build_logging_config(settings: Settings) -> dict[str, Any]:
    formatter: dict[str, Any] = (
        {"()": JsonLineFormatter, "service": settings.app_name}
        if settings.log_json
        else {"format": TEXT_FORMAT}
    )
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "root": {"level": settings.log_level, "handlers": ["console"]},
        "loggers": {
            # SQL statements only when DB_ECHO is on
            "sqlalchemy.engine": {
                "level": "INFO" if settings.db_echo else "WARNING",
            },
        },
    }


def configure_logging(settings: Settings | None = None) -> None:
    """Replace root handlers with a single console handler."""
    logging.config.dictConfig(build_logging_config(settings or get_settings()))
