"""Process-level logging setup for applications embedding the client."""

from __future__ import annotations

import json
import logging
from typing import Optional

from urchain_rpc.config import UrchainConfig, default_config

EXTRA_FIELDS = ("command", "attempt", "status_code", "error")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, default=str)


def configure_logging(config: Optional[UrchainConfig] = None) -> None:
    """Install a root handler using the configured level and format (json or plain)."""
    config = config or default_config
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler], force=True)
    else:
        logging.basicConfig(level=level, force=True)
