"""Flash news feed fetching module for Flash News Bot."""

import time
from typing import Any

import requests

from .config import FeedConfig
from .logging_config import create_execution_logger
from .models import NewsItem


class FeedFetchError(Exception):
    """Raised when the news feed cannot be downloaded or decoded."""


def extract_news_list(payload: Any) -> list:
    """Return ``payload["data"]["data"]["news"]``, or [] if any step is missing."""
    node = payload
    for key in ("data", "data", "news"):
        if not isinstance(node, dict):
            return []
        node = node.get(key)
    return node if isinstance(node, list) else []


class FeedFetcher:
    """Downloads the flash news list and normalizes its entries."""

    def __init__(self, config: FeedConfig, execution_id: str | None = None):
        """Initialize FeedFetcher with configuration.

        Args:
            config: Feed endpoint configuration
            execution_id: Execution ID for logging context
        """
        self.config = config
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": "Flash-News-Bot/1.0", "Accept": "application/json"}
        )

        self.logger.info(
            "FeedFetcher initialized", feed_url=config.url, timeout=config.timeout
        )

    def fetch(self) -> list[NewsItem]:
        """Fetch the current news list, oldest entry first.

        Returns:
            NewsItem objects in chronological order

        Raises:
            FeedFetchError: If the request fails, times out, returns a
                non-2xx status or the body is not JSON
        """
        timestamp = int(time.time() * 1000)

        try:
            response = self.session.get(
                self.config.url,
                params={"_t": timestamp},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed: {e}",
                feed_url=self.config.url,
                error=str(e),
            )
            raise FeedFetchError(str(e)) from e
        except ValueError as e:
            self.logger.error(
                f"Failed to decode feed response: {e}",
                feed_url=self.config.url,
                error=str(e),
            )
            raise FeedFetchError(f"Invalid JSON in feed response: {e}") from e

        raw_entries = extract_news_list(payload)
        items = []
        for entry in reversed(raw_entries):
            item = NewsItem.from_raw(entry)
            if item is None:
                self.logger.debug("Skipping entry without id")
                continue
            items.append(item)

        self.logger.debug(
            "Feed downloaded",
            status_code=response.status_code,
            total_entries=len(raw_entries),
            items_count=len(items),
        )
        return items
