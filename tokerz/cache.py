"""TTL cache for balance lookups, plus the fixed-window rate limiter.

Both are plain in-memory maps owned by one BalanceAggregator. They are only
mutated between await points, so no locking is needed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from tokerz.models import BalanceResult, CacheEntryInfo, CacheInfo, RateLimitSpec
from tokerz.security import redact_key

# Default freshness of a successful balance lookup
BALANCE_TTL_SECONDS = 5 * 60

# Only this many leading characters of a secret participate in the cache key
KEY_PREFIX_LEN = 10

Clock = Callable[[], float]


def _cache_key(vendor: str, secret: str) -> tuple[str, str]:
    return vendor, secret[:KEY_PREFIX_LEN]


def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat(timespec="seconds")


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits / self.total if self.total else 0.0

    def to_dict(self) -> dict:
        return {"hits": self.hits, "misses": self.misses, "hit_rate": round(self.hit_rate, 3)}


@dataclass
class CacheEntry:
    result: BalanceResult
    expires_at: float


class BalanceCache:
    """Successful BalanceResults keyed by (vendor, secret prefix) with absolute expiry."""

    def __init__(self, ttl_seconds: float = BALANCE_TTL_SECONDS, clock: Clock = time.time):
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: dict[tuple[str, str], CacheEntry] = {}
        self.stats = CacheStats()

    def get(self, vendor: str, secret: str) -> Optional[BalanceResult]:
        ck = _cache_key(vendor, secret)
        entry = self._store.get(ck)
        if entry and self._clock() < entry.expires_at:
            self.stats.hits += 1
            return entry.result
        if entry:
            del self._store[ck]
        self.stats.misses += 1
        return None

    def put(self, vendor: str, secret: str, result: BalanceResult) -> None:
        self._store[_cache_key(vendor, secret)] = CacheEntry(result, self._clock() + self.ttl)

    def clear(self) -> None:
        self._store.clear()

    def info(self) -> CacheInfo:
        now = self._clock()
        entries = tuple(
            CacheEntryInfo(
                key=f"{vendor}:{redact_key(prefix)}",
                expired=now > entry.expires_at,
                expires_at=_iso(entry.expires_at),
            )
            for (vendor, prefix), entry in self._store.items()
        )
        return CacheInfo(
            total_entries=len(self._store),
            entries=entries,
            hits=self.stats.hits,
            misses=self.stats.misses,
        )

    def __len__(self) -> int:
        return len(self._store)


@dataclass
class RateWindow:
    requests: int
    reset_at: float


class FixedWindowRateLimiter:
    """Per-vendor request counter that resets at fixed window boundaries."""

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}

    def allow(self, vendor: str, spec: Optional[RateLimitSpec]) -> bool:
        """Count one request against `vendor`. False once the window is exhausted."""
        if spec is None:
            return True
        if spec.max_requests <= 0:
            return False
        now = self._clock()
        window = self._windows.get(vendor)
        if window is None or now > window.reset_at:
            self._windows[vendor] = RateWindow(requests=1, reset_at=now + spec.window_seconds)
            return True
        if window.requests >= spec.max_requests:
            return False
        window.requests += 1
        return True

    def window(self, vendor: str) -> Optional[RateWindow]:
        return self._windows.get(vendor)

    def reset(self) -> None:
        self._windows.clear()
