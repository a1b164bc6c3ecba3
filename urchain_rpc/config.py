"""
Configuration helpers for the urchain client.

This module centralizes base URL selection, API key loading, transport
timeout, retry defaults and logging options. No secrets are stored in the
repository; the API key is read from environment or a local file if present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Default connection settings
DEFAULT_BASE_URL = os.getenv("URCHAIN_BASE_URL", "http://localhost:3000/")

# Key shipped as a sample value by early urchain deployments; never valid.
PLACEHOLDER_API_KEY = "1234567890"

# Retry defaults: constant spacing with a very high ceiling.
MAX_ATTEMPTS = 1000
RETRY_DELAY_MS = 5000


def _load_timeout() -> float:
    raw_timeout = os.getenv("URCHAIN_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return 10.0
    return 10.0


def _load_int(env_var: str, default: int, *, minimum: int) -> int:
    raw = os.getenv(env_var)
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    if parsed < minimum:
        return default
    return parsed


DEFAULT_TIMEOUT = _load_timeout()
DEFAULT_MAX_ATTEMPTS = _load_int("URCHAIN_MAX_ATTEMPTS", MAX_ATTEMPTS, minimum=1)
DEFAULT_RETRY_DELAY_MS = _load_int("URCHAIN_RETRY_DELAY_MS", RETRY_DELAY_MS, minimum=0)

# API key handling
API_KEY_ENV_VAR = "URCHAIN_API_KEY"
API_KEY_FILE_ENV_VAR = "URCHAIN_API_KEY_FILE"
DEFAULT_API_KEY_FILE = "apikey.txt"

LOG_LEVEL = os.getenv("URCHAIN_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("URCHAIN_LOG_FORMAT", "json")  # json or plain


def load_api_key() -> Optional[str]:
    """
    Load the urchain API key from environment or a local file.

    Returns:
        The API key string if available, otherwise None. Callers must not log
        the returned value.
    """
    env_key = os.getenv(API_KEY_ENV_VAR)
    if env_key:
        return env_key.strip()

    key_path = os.getenv(API_KEY_FILE_ENV_VAR, DEFAULT_API_KEY_FILE)
    if key_path:
        path = Path(key_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(frozen=True, slots=True)
class UrchainConfig:
    """Runtime configuration for urchain indexer access."""

    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = field(default_factory=load_api_key, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT


default_config = UrchainConfig()
