"""Configuration management for clubdesk."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CLUBDESK_HOME = Path(os.environ.get("CLUBDESK_HOME", Path.home() / "clubdesk"))
CONFIG_FILE = CLUBDESK_HOME / "config" / "clubdesk.conf"


@dataclass
class Config:
    """clubdesk configuration."""

    api_base_url: str = "http://localhost:3000"
    api_token: str = ""
    user_id: str = ""
    poll_interval: int = 60
    page_size: int = 50
    timezone: str = "Asia/Ho_Chi_Minh"
    activities_file: str = ""


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"{key.upper()} must be positive, using {default}")
        return default
    return parsed


def load_config(path: Path | None = None) -> Config:
    """Load configuration from clubdesk.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "api_token":
                config.api_token = value
            case "user_id":
                config.user_id = value
            case "poll_interval":
                config.poll_interval = _parse_int(key, value, config.poll_interval)
            case "page_size":
                config.page_size = _parse_int(key, value, config.page_size)
            case "timezone":
                config.timezone = value
            case "activities_file":
                config.activities_file = value
            case _:
                logger.debug(f"Ignoring unknown config key {key.upper()}")

    return config
