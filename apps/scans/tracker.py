"""
Scanning-station duplicate suppression.

Advisory only: the tracker saves network calls and repeated feedback when a
camera re-detects the same code, and it is never consulted for correctness.
The server's uniqueness constraint on ScannedUnit is authoritative.

Two pieces of state:

- a cooldown map (unit id -> when it was last let through), pruned once
  entries are older than the cooldown window;
- a processed-code store holding identifiers already accepted in this
  session. ``CacheProcessedCodeStore`` keeps it in the Django cache keyed
  by session, with a TTL, so it survives restarts and is shared between
  processes using the same cache.
"""

import logging
import time
from typing import Callable, Dict, Optional

from django.conf import settings
from django.core.cache import cache as default_cache

logger = logging.getLogger(__name__)


class ProcessedCodeStore:
    """Set of unit identifiers already accepted in one session."""

    def __contains__(self, unit_id):
        raise NotImplementedError

    def add(self, unit_id):
        raise NotImplementedError

    def discard(self, unit_id):
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError


class MemoryProcessedCodeStore(ProcessedCodeStore):
    def __init__(self):
        self._codes = set()

    def __contains__(self, unit_id):
        return unit_id in self._codes

    def __len__(self):
        return len(self._codes)

    def add(self, unit_id):
        self._codes.add(unit_id)

    def discard(self, unit_id):
        self._codes.discard(unit_id)

    def clear(self):
        self._codes.clear()


class CacheProcessedCodeStore(ProcessedCodeStore):
    """Processed codes for one session, stored in the Django cache."""

    key_prefix = 'scans:processed'

    def __init__(self, session_key: str, *, cache=None, ttl_seconds: Optional[int] = None):
        if not session_key:
            raise ValueError('session_key is required')
        self.session_key = session_key
        self.cache = cache if cache is not None else default_cache
        if ttl_seconds is None:
            ttl_seconds = settings.REWARDS['PROCESSED_CODES_TTL_SECONDS']
        self.ttl_seconds = ttl_seconds

    @property
    def cache_key(self):
        return f'{self.key_prefix}:{self.session_key}'

    def _load(self):
        return set(self.cache.get(self.cache_key) or ())

    def _save(self, codes):
        if codes:
            self.cache.set(self.cache_key, sorted(codes), timeout=self.ttl_seconds)
        else:
            self.cache.delete(self.cache_key)

    def __contains__(self, unit_id):
        return unit_id in self._load()

    def __len__(self):
        return len(self._load())

    def add(self, unit_id):
        codes = self._load()
        codes.add(unit_id)
        self._save(codes)

    def discard(self, unit_id):
        codes = self._load()
        codes.discard(unit_id)
        self._save(codes)

    def clear(self):
        self.cache.delete(self.cache_key)


class ScanTracker:
    """
    Decide whether a detected code is worth sending to the server.

    Args:
        cooldown_seconds: Window during which repeat detections of the same
            identifier are suppressed (default REWARDS['SCAN_COOLDOWN_SECONDS'])
        store: Processed-code store (default: in-memory)
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        *,
        cooldown_seconds: Optional[float] = None,
        store: Optional[ProcessedCodeStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if cooldown_seconds is None:
            cooldown_seconds = settings.REWARDS['SCAN_COOLDOWN_SECONDS']
        self.cooldown_seconds = cooldown_seconds
        self.store = store if store is not None else MemoryProcessedCodeStore()
        self.clock = clock
        self._last_seen: Dict[str, float] = {}

    def prune(self):
        """Drop cooldown entries older than the window."""
        now = self.clock()
        expired = [
            unit_id for unit_id, seen in self._last_seen.items()
            if now - seen >= self.cooldown_seconds
        ]
        for unit_id in expired:
            del self._last_seen[unit_id]

    def in_cooldown(self, unit_id: str) -> bool:
        self.prune()
        return unit_id in self._last_seen

    def is_processed(self, unit_id: str) -> bool:
        return unit_id in self.store

    def should_submit(self, unit_id: str) -> bool:
        """
        True when the identifier should be sent to the server.

        Letting an identifier through starts its cooldown window.
        """
        if self.is_processed(unit_id):
            logger.debug("Tracker: %s already processed in this session", unit_id)
            return False
        if self.in_cooldown(unit_id):
            logger.debug("Tracker: %s in cooldown", unit_id)
            return False

        self._last_seen[unit_id] = self.clock()
        return True

    def mark_processed(self, unit_id: str):
        """Record a successful submission."""
        self.store.add(unit_id)

    def reset(self):
        self._last_seen.clear()
        self.store.clear()
