"""Configuration management for Nudge."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

NUDGE_HOME = Path(os.environ.get("NUDGE_HOME", Path.home() / "nudge"))
CONFIG_FILE = NUDGE_HOME / "config" / "nudge.conf"
DATA_DIR = NUDGE_HOME / "data"


@dataclass
class Config:
    """Nudge configuration."""

    data_file: str = ""
    backup_dir: str = ""
    backup_retention_days: int = 7
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    timezone: str = "America/Toronto"
    # Morning notification
    notification_time: str = "08:00"
    telegram_bot_token: str = ""
    telegram_chat_ids: list[int] = field(default_factory=list)
    # List tuning
    distant_recurring_days: int = 3
    attention_preview_count: int = 3
    urgent_needs_attention: bool = True

    @property
    def data_path(self) -> Path:
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "nudge.json"

    @property
    def backup_path(self) -> Path:
        if self.backup_dir:
            return Path(self.backup_dir).expanduser()
        return DATA_DIR / "backups"

    def notification_hour_minute(self) -> tuple[int, int]:
        """Parse notification_time as HH:MM, falling back to 08:00."""
        try:
            hour, minute = map(int, self.notification_time.split(":"))
        except ValueError:
            logger.warning(f"Invalid notification time format: {self.notification_time}")
            return 8, 0
        if not (0 <= hour < 24 and 0 <= minute < 60):
            logger.warning(f"Notification time out of range: {self.notification_time}")
            return 8, 0
        return hour, minute


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}")
        return default


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(path: Path | None = None) -> Config:
    """Load configuration from nudge.conf file."""
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
            case "data_file":
                config.data_file = value
            case "backup_dir":
                config.backup_dir = value
            case "backup_retention_days":
                config.backup_retention_days = _parse_int(key, value, config.backup_retention_days)
            case "anthropic_api_key":
                config.anthropic_api_key = value
            case "anthropic_model":
                config.anthropic_model = value
            case "timezone":
                config.timezone = value
            case "notification_time":
                config.notification_time = value
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_chat_ids":
                ids = []
                for chunk in value.split(","):
                    chunk = chunk.strip()
                    if not chunk:
                        continue
                    try:
                        ids.append(int(chunk))
                    except ValueError:
                        logger.warning(f"Ignoring invalid Telegram chat id: {chunk!r}")
                config.telegram_chat_ids = ids
            case "distant_recurring_days":
                config.distant_recurring_days = _parse_int(key, value, config.distant_recurring_days)
            case "attention_preview_count":
                config.attention_preview_count = _parse_int(key, value, config.attention_preview_count)
            case "urgent_needs_attention":
                config.urgent_needs_attention = _parse_bool(value)

    # Environment wins over the file for the API key
    if os.environ.get("ANTHROPIC_API_KEY"):
        config.anthropic_api_key = os.environ["ANTHROPIC_API_KEY"]

    return config
