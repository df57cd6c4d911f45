"""Short-TTL key/value cache keyed by design node id.

Entries expire a fixed time after creation, regardless of access. Lookups
ignore stale entries; loading a persisted mapping prunes them and reports
whether anything was dropped so the caller can rewrite storage at once.

Serialized form (a flat JSON object):
    {"<nodeId>": {"<payload_field>": <payload>, "timestamp": <epoch ms>}}
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from design2api import settings

logger = logging.getLogger("design2api.cache")

T = TypeVar("T")

CACHE_TTL_MS = settings.CACHE_TTL_SECONDS * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    payload: T
    timestamp: int

    def is_fresh(self, now: int, ttl_ms: int) -> bool:
        return now - self.timestamp < ttl_ms


class TTLCache(Generic[T]):
    """In-memory TTL cache with a JSON-serializable snapshot.

    Args:
        payload_field: Key holding the payload in the serialized entry
            ("url" for images, "schema" for schemas).
        ttl_ms: Lifetime of an entry in milliseconds.
        clock: Returns the current epoch time in ms.
    """

    def __init__(
        self,
        payload_field: str,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.payload_field = payload_field
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[T]:
        """Payload if present and younger than the TTL, else None."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock(), self.ttl_ms):
            return None
        return entry.payload

    def set(self, key: str, payload: T) -> None:
        """Insert or overwrite; the entry's clock restarts."""
        self._entries[key] = CacheEntry(payload=payload, timestamp=self._clock())

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            key: {self.payload_field: entry.payload, "timestamp": entry.timestamp}
            for key, entry in self._entries.items()
        }

    def dumps(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def load(self, raw: Optional[str]) -> int:
        """Replace contents from a serialized snapshot, dropping stale entries.

        Malformed entries are dropped like stale ones. A snapshot that is not
        a JSON object loads as empty.

        Returns:
            Number of entries dropped.
        """
        self._entries = {}
        if not raw:
            return 0

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"TTLCache({self.payload_field}): unreadable snapshot, starting empty")
            return 0
        if not isinstance(data, dict):
            return 0

        now = self._clock()
        dropped = 0
        for key, value in data.items():
            entry = self._parse_entry(value)
            if entry is None or not entry.is_fresh(now, self.ttl_ms):
                dropped += 1
                continue
            self._entries[key] = entry

        if dropped:
            logger.info(f"TTLCache({self.payload_field}): pruned {dropped} stale entries on load")
        return dropped

    def _parse_entry(self, value: Any) -> Optional[CacheEntry[T]]:
        if not isinstance(value, dict) or self.payload_field not in value:
            return None
        timestamp = value.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            return None
        return CacheEntry(payload=value[self.payload_field], timestamp=int(timestamp))

    @classmethod
    def from_snapshot(
        cls, payload_field: str, raw: Optional[str], **kwargs: Any
    ) -> Tuple["TTLCache[T]", int]:
        cache: TTLCache[T] = cls(payload_field, **kwargs)
        dropped = cache.load(raw)
        return cache, dropped
