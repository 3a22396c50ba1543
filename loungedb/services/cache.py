from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .errors import RecordParseError

logger = logging.getLogger(__name__)


class PayloadCache:
    """Time-expiring map of entity id -> parsed payload.

    Expiry is lazy: an expired entry is replaced on its next ``get``. Entries
    that are never requested again stay in memory until ``purge_expired``;
    the key space is bounded by the airport directory.

    A load failure (missing file, malformed JSON) returns None and is not
    cached, so a later crawl becomes visible on the next request.
    """

    def __init__(
        self,
        loader: Callable[[str], Any],
        *,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        now = self._clock()
        with self._lock:
            hit = self._entries.get(key)
        if hit is not None and now < hit[1]:
            return hit[0]

        try:
            value = self._loader(key)
        except FileNotFoundError:
            logger.debug("No stored record for %s", key)
            return None
        except (RecordParseError, OSError) as exc:
            logger.warning("Could not load record %s: %s", key, exc)
            return None

        with self._lock:
            self._entries[key] = (value, self._clock() + self.ttl_seconds)
        return value

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
            for k in stale:
                del self._entries[k]
        return len(stale)
