"""Configuration management for Flash News Bot."""

import os
from dataclasses import dataclass

DEFAULT_FEED_URL = (
    "https://news.futunn.com/news-site-api/main/get-flash-list?pageSize=30"
)
DEFAULT_SENT_KEYS_FILE = "futunn_sent_news_ids.json"
DEFAULT_MIN_INTERVAL_MS = 10000
DEFAULT_MAX_INTERVAL_MS = 30000


@dataclass(frozen=True)
class TelegramConfig:
    """Configuration for Telegram Bot API."""

    bot_token: str
    chat_id: str
    parse_mode: str = "Markdown"
    disable_web_page_preview: bool = True
    timeout: float = 10.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.bot_token and self.chat_id)


@dataclass(frozen=True)
class FeedConfig:
    """Configuration for the flash news endpoint."""

    url: str = DEFAULT_FEED_URL
    timeout: float = 10.0


@dataclass(frozen=True)
class StoreConfig:
    """Configuration for the sent id file."""

    path: str = DEFAULT_SENT_KEYS_FILE


@dataclass(frozen=True)
class ScheduleConfig:
    """Configuration for the polling loop."""

    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS
    max_interval_ms: int = DEFAULT_MAX_INTERVAL_MS
    shutdown_grace_seconds: float = 1.5


def _int_env(name: str, default: int) -> int:
    """Read a positive integer from the environment, else the default."""
    raw = os.getenv(name, "").strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.bot_token = os.getenv("TG_BOT_TOKEN", "").strip()
        self.chat_id = os.getenv("TG_CHAT_ID", "").strip()
        self.feed_url = os.getenv("FUTUNN_API_URL", DEFAULT_FEED_URL)
        self.sent_keys_file = os.getenv("SENT_KEYS_FILE", DEFAULT_SENT_KEYS_FILE)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "text")

        min_interval = _int_env("MIN_INTERVAL_MS", DEFAULT_MIN_INTERVAL_MS)
        max_interval = _int_env("MAX_INTERVAL_MS", DEFAULT_MAX_INTERVAL_MS)
        if min_interval > max_interval:
            min_interval, max_interval = max_interval, min_interval
        self.min_interval_ms = min_interval
        self.max_interval_ms = max_interval

    def get_telegram_config(self) -> TelegramConfig:
        """Get Telegram configuration."""
        return TelegramConfig(bot_token=self.bot_token, chat_id=self.chat_id)

    def get_feed_config(self) -> FeedConfig:
        """Get feed endpoint configuration."""
        return FeedConfig(url=self.feed_url)

    def get_store_config(self) -> StoreConfig:
        """Get sent id store configuration."""
        return StoreConfig(path=self.sent_keys_file)

    def get_schedule_config(self) -> ScheduleConfig:
        """Get schedule configuration."""
        return ScheduleConfig(
            min_interval_ms=self.min_interval_ms,
            max_interval_ms=self.max_interval_ms,
        )
