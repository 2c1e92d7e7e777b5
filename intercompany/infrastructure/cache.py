"""
Availability Cache - Memoized availability query results.

Entries are keyed by query window. Whoever writes an underlying work or
availability record must call `invalidate_date` for the affected day, or
`clear` after bulk changes. Nothing expires on its own.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Tuple

from intercompany.domain.entities import AvailabilityDay

logger = logging.getLogger(__name__)

Window = Tuple[date, date]


@dataclass
class CacheStats:
    """Hit/miss counters for monitoring."""
    hits: int = 0
    misses: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def to_dict(self) -> dict:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'invalidations': self.invalidations,
            'hit_rate': self.hit_rate,
        }


class AvailabilityCache:
    """
    Thread-safe cache of availability rows per [from, to) window.

    The availability query covers whole months: a window holds every month
    from month(from) up to, but excluding, month(to).
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._entries: Dict[Window, Tuple[AvailabilityDay, ...]] = {}
        self._lock = threading.Lock()
        self.stats = CacheStats()

    @classmethod
    def from_config(cls, config) -> "AvailabilityCache":
        """Create a cache honouring `cache.availability_enabled`."""
        return cls(enabled=config.availability_cache_enabled)

    def get_or_load(
        self,
        date_from: date,
        date_to: date,
        loader: Callable[[date, date], List[AvailabilityDay]],
    ) -> List[AvailabilityDay]:
        """
        Return cached rows for the window, loading them on a miss.

        Args:
            date_from: Window start (inclusive)
            date_to: Window end (exclusive)
            loader: Query to run on a miss

        Returns:
            Availability rows (a fresh list on every call)
        """
        if not self.enabled:
            return list(loader(date_from, date_to))

        key = (date_from, date_to)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self.stats.hits += 1
                return list(cached)
            self.stats.misses += 1

        rows = tuple(loader(date_from, date_to))
        with self._lock:
            self._entries[key] = rows
        logger.debug(f"Cached {len(rows)} availability rows for {date_from} - {date_to}")
        return list(rows)

    def invalidate_date(self, day: date) -> int:
        """
        Drop every entry whose window covers the month of `day`.

        Returns:
            Number of entries removed
        """
        month = day.replace(day=1)
        with self._lock:
            stale = [
                key for key in self._entries
                if key[0].replace(day=1) <= month < key[1].replace(day=1)
            ]
            for key in stale:
                del self._entries[key]
            self.stats.invalidations += len(stale)

        if stale:
            logger.info(f"Invalidated {len(stale)} availability cache entries for {day}")
        return len(stale)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self.stats.invalidations += count
        logger.info(f"Cleared availability cache ({count} entries)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
