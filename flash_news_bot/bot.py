"""Main entry point for Flash News Bot."""

import time
from datetime import UTC, datetime
from typing import Any

from .config import Config
from .dedup import Deduplicator, SentIdStore
from .feed import FeedFetcher, FeedFetchError
from .logging_config import create_execution_logger, setup_structured_logging
from .scheduler import Scheduler
from .telegram import TelegramNotifier


class FlashNewsBot:
    """One fetch, filter, notify and persist pass per call to run_cycle()."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        deduplicator: Deduplicator,
        notifier: TelegramNotifier,
    ):
        self.fetcher = fetcher
        self.deduplicator = deduplicator
        self.notifier = notifier

    def run_cycle(self) -> dict[str, Any]:
        """
        Fetch the feed and notify every item not seen before.

        Ids are recorded as sent as soon as their send is dispatched, whether
        or not delivery later succeeds.

        Returns:
            Metrics dictionary for the cycle
        """
        execution_id = f"cycle_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
        logger = create_execution_logger("main", execution_id)
        logger.start_cycle()

        metrics = {
            "items_found": 0,
            "new_items": 0,
            "duplicates": 0,
            "fetch_failed": False,
        }

        logger.info("Fetching flash news")
        try:
            items = self.fetcher.fetch()
        except FeedFetchError as e:
            logger.error(f"Feed request or parsing failed: {e}", error=str(e))
            metrics["fetch_failed"] = True
            logger.finish_cycle(metrics)
            return metrics

        metrics["items_found"] = len(items)

        new_ids = []
        batch_ids = set()
        for item in items:
            if not self.deduplicator.is_new(item.id) or item.id in batch_ids:
                metrics["duplicates"] += 1
                continue

            self.notifier.dispatch(item)
            new_ids.append(item.id)
            batch_ids.add(item.id)

        if new_ids:
            self.deduplicator.record(new_ids)

        metrics["new_items"] = len(new_ids)
        if new_ids:
            logger.info(f"Fetch complete. Found {len(new_ids)} new items and pushed them")

        logger.finish_cycle(metrics)
        return metrics


def build_bot(config: Config) -> FlashNewsBot:
    """Wire the bot components from configuration."""
    store = SentIdStore(config.get_store_config().path)
    return FlashNewsBot(
        fetcher=FeedFetcher(config.get_feed_config()),
        deduplicator=Deduplicator(store),
        notifier=TelegramNotifier(config.get_telegram_config()),
    )


def main() -> int:
    """Run the polling loop until SIGINT or SIGTERM."""
    config = Config()
    setup_structured_logging(config.log_level, config.log_format)
    main_logger = create_execution_logger("main")

    telegram_config = config.get_telegram_config()
    if not telegram_config.has_credentials:
        main_logger.warning(
            "TG_BOT_TOKEN or TG_CHAT_ID is not set; messages will not be sent"
        )

    bot = build_bot(config)
    schedule_config = config.get_schedule_config()
    scheduler = Scheduler(schedule_config, bot.run_cycle)
    scheduler.install_signal_handlers()

    main_logger.info(
        "Flash News Bot started",
        feed_url=config.feed_url,
        min_interval_ms=schedule_config.min_interval_ms,
        max_interval_ms=schedule_config.max_interval_ms,
    )
    scheduler.run()

    time.sleep(schedule_config.shutdown_grace_seconds)
    bot.notifier.shutdown()
    main_logger.info("Stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
