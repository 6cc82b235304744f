"""Deduplication module for Flash News Bot."""

import json
from pathlib import Path

from .logging_config import create_execution_logger
from .models import is_valid_id

MAX_SENT_IDS = 5000


def trim_ids(ids: list, limit: int = MAX_SENT_IDS) -> list:
    """Keep only the most recently appended ``limit`` ids."""
    if len(ids) > limit:
        return ids[len(ids) - limit :]
    return list(ids)


class SentIdStore:
    """Persists the list of already-notified ids as a JSON array on disk."""

    def __init__(self, path: str | Path, execution_id: str | None = None):
        self.path = Path(path)
        self.logger = create_execution_logger("sent_id_store", execution_id)

    def load(self) -> list:
        """Load persisted ids.

        Returns:
            The stored ids in insertion order, or an empty list when the file
            is missing, unreadable or does not hold a JSON array
        """
        if not self.path.exists():
            self.logger.info("No sent id file yet", path=str(self.path))
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(
                f"Unable to read sent id file: {e}", path=str(self.path), error=str(e)
            )
            return []

        if not isinstance(data, list):
            self.logger.error(
                "Sent id file does not contain a JSON array",
                path=str(self.path),
                data_type=type(data).__name__,
            )
            return []

        ids = [item_id for item_id in data if is_valid_id(item_id)]
        dropped = len(data) - len(ids)
        if dropped:
            self.logger.warning(
                f"Dropped {dropped} malformed entries from sent id file",
                path=str(self.path),
                dropped=dropped,
            )

        self.logger.info("Loaded sent ids", path=str(self.path), count=len(ids))
        return ids

    def save(self, ids: list) -> bool:
        """Overwrite the file with the most recent ids.

        Args:
            ids: Ids in insertion order; only the last MAX_SENT_IDS are written

        Returns:
            True if the file was written, False otherwise
        """
        final_ids = trim_ids(ids)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(final_ids, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(
                f"Unable to write sent id file: {e}", path=str(self.path), error=str(e)
            )
            return False

        self.logger.debug("Saved sent ids", path=str(self.path), count=len(final_ids))
        return True


class Deduplicator:
    """Tracks which news ids have already been notified."""

    def __init__(self, store: SentIdStore, execution_id: str | None = None):
        """Initialize the Deduplicator and load the persisted ids once.

        Args:
            store: Backing store for the sent id list
            execution_id: Execution ID for logging context
        """
        self.store = store
        self.logger = create_execution_logger("deduplicator", execution_id)
        loaded = store.load()
        self._ids = trim_ids(loaded)
        # the whole file counts as sent, not just the persisted window
        self._seen = set(loaded)

        self.logger.info("Deduplicator initialized", known_ids=len(self._ids))

    @property
    def sent_ids(self) -> list:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def is_new(self, item_id) -> bool:
        """Check whether an id has not been notified yet."""
        return item_id not in self._seen

    def record(self, item_ids: list) -> bool:
        """Mark ids as sent and persist the bounded list.

        Ids stay in the in-memory set for the lifetime of the process even
        after they fall out of the persisted window.

        Args:
            item_ids: Newly notified ids in processing order

        Returns:
            True if the store was written, False if nothing to write or the
            write failed
        """
        if not item_ids:
            return False

        self._ids.extend(item_ids)
        self._seen.update(item_ids)
        self._ids = trim_ids(self._ids)

        return self.store.save(self._ids)
