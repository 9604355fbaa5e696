"""
History Service - ordered calculation history over a key-value store.

The history is persisted as a JSON array of records, newest first, under a
single key. Every mutation writes the full list back immediately.
"""
import json
import logging
from typing import Optional

from ..config.settings import get_settings, Settings
from ..engine.models import PricingRecord, record_from_dict
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class HistoryStore:
    """CRUD over the newest-first list of pricing records."""

    def __init__(self, store: KeyValueStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()
        self.key = self.settings.history_key

    def load(self) -> list[PricingRecord]:
        """
        Read the persisted history.

        Returns an empty list when nothing is stored or the payload is
        malformed; a bad payload is logged and discarded, never raised.
        """
        payload = self.store.get(self.key)
        if payload is None:
            return []

        try:
            entries = json.loads(payload)
            if not isinstance(entries, list):
                raise TypeError(f"expected a list, got {type(entries).__name__}")
            return [record_from_dict(entry) for entry in entries]
        except (ValueError, TypeError, KeyError, RecursionError) as e:
            logger.warning("Discarding malformed history under %r: %s", self.key, e)
            return []

    def _save(self, records: list[PricingRecord]) -> None:
        self.store.set(self.key, json.dumps([r.to_dict() for r in records]))

    def append(self, record: PricingRecord) -> list[PricingRecord]:
        """Prepend a record, persist the full list and return it."""
        records = [record] + self.load()
        self._save(records)
        logger.info("Saved %s calculation for %r (%d in history)",
                    record.mode.value, record.product_name, len(records))
        return records

    def get(self, index: int) -> PricingRecord:
        """Return the record at index. Raises IndexError when out of range."""
        records = self.load()
        self.check_index(index, len(records))
        return records[index]

    def delete_at(self, index: int) -> list[PricingRecord]:
        """Remove the record at index, persist and return the remaining list."""
        records = self.load()
        self.check_index(index, len(records))
        removed = records.pop(index)
        self._save(records)
        logger.info("Deleted calculation %d (%r)", index, removed.product_name)
        return records

    def clear(self) -> None:
        """Drop the whole history, removing the persisted key."""
        self.store.remove(self.key)
        logger.info("Cleared calculation history")

    def __len__(self) -> int:
        return len(self.load())

    @staticmethod
    def check_index(index: int, size: int):
        """Raise IndexError unless 0 <= index < size."""
        if not 0 <= index < size:
            raise IndexError(f"History index {index} out of range (0..{size - 1})")


class ThemePreference:
    """Dark/light theme flag stored as "dark" or "light"."""

    DARK = 'dark'
    LIGHT = 'light'

    def __init__(self, store: KeyValueStore, settings: Optional[Settings] = None):
        self.store = store
        self.key = (settings or get_settings()).theme_key

    def load(self, default_dark: bool = True) -> bool:
        """Return True for dark mode. Any other stored value means light; absent uses the default."""
        value = self.store.get(self.key)
        if not value:
            return default_dark
        return value == self.DARK

    def save(self, dark: bool) -> None:
        self.store.set(self.key, self.DARK if dark else self.LIGHT)
