"""Balance aggregator: cache, fixed-window rate limit, one HTTP GET, normalized result.

- Cache, rate limiter and HTTP client are constructor-injected, so every
  aggregator instance has isolated state
- Every failure mode ends in BalanceResult.error; fetch_balance and
  fetch_multiple never raise
- Batches fan out with asyncio.gather inside a group, with a fixed pause
  between groups
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Optional

import httpx

from tokerz.audit_log import AuditLog
from tokerz.balances import BalanceSource, discover_sources
from tokerz.cache import BalanceCache, FixedWindowRateLimiter
from tokerz.models import BalanceEntry, BalanceResult, CacheInfo, RateLimitSpec
from tokerz.security import redact_key, scrub, suppress_credential_logging

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
BATCH_SIZE = 5
BATCH_DELAY = 1.0

RATE_LIMIT_ERROR = "Rate limit exceeded for balance API"
TIMEOUT_ERROR = "Request timeout"


def normalize_vendor(provider_id: str) -> str:
    """Strip a model-variant suffix: ``deepseek-r1`` -> ``deepseek``."""
    return provider_id.split("-", 1)[0] or provider_id


def supports_balance(provider_id: str) -> bool:
    discover_sources()
    source = BalanceSource.find_source(normalize_vendor(provider_id))
    return source is not None and source.supports_balance


def supported_balance_providers() -> list[str]:
    discover_sources()
    return sorted(name for name, cls in BalanceSource.get_registry().items() if cls.supports_balance)


class BalanceAggregator:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[BalanceCache] = None,
        limiter: Optional[FixedWindowRateLimiter] = None,
        timeout: float = DEFAULT_TIMEOUT,
        rate_limits: Optional[dict[str, RateLimitSpec]] = None,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY,
        audit_log: Optional[AuditLog] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        suppress_credential_logging()
        discover_sources()
        self._client = client
        self._owns_client = client is None
        self.cache = cache if cache is not None else BalanceCache()
        self.limiter = limiter if limiter is not None else FixedWindowRateLimiter()
        self.timeout = timeout
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.audit_log = audit_log
        self._rate_limits = dict(rate_limits or {})

    async def __aenter__(self) -> "BalanceAggregator":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self.audit_log:
            self.audit_log.flush()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(max_redirects=0)
        return self._client

    def _rate_limit_for(self, source: BalanceSource) -> Optional[RateLimitSpec]:
        return self._rate_limits.get(source.name, source.rate_limit)

    def _log(self, event: str, vendor: str, secret: str, result: Optional[BalanceResult] = None,
             latency_ms: float = 0.0) -> None:
        if not self.audit_log:
            return
        self.audit_log.log(
            event,
            vendor=vendor,
            key=redact_key(secret),
            balance=result.balance if result and result.ok else None,
            currency=result.currency if result else "",
            error=(result.error or "") if result else "",
            latency_ms=latency_ms,
        )

    async def fetch_balance(
        self,
        vendor_id: str,
        secret: str,
        skip_cache: bool = False,
        timeout: Optional[float] = None,
    ) -> BalanceResult:
        """Look up the wallet balance behind `secret`. Never raises."""
        vendor = normalize_vendor(vendor_id)
        source = BalanceSource.find_source(vendor)
        if source is None:
            logger.info("No balance source for provider %s", vendor_id)
            return BalanceResult.failure(f"Wallet balance not supported for provider: {vendor_id}")
        if not source.supports_balance:
            return source.failure(source.unsupported_reason)

        if not skip_cache:
            cached = self.cache.get(vendor, secret)
            if cached is not None:
                logger.debug("Cache hit for %s (%s)", vendor, redact_key(secret))
                self._log("cache_hit", vendor, secret, cached)
                return cached

        if not self.limiter.allow(vendor, self._rate_limit_for(source)):
            logger.warning("Rate limit exceeded for %s", vendor)
            result = source.failure(RATE_LIMIT_ERROR)
            self._log("rate_limited", vendor, secret, result)
            return result

        start = time.monotonic()
        result = await self._request(source, secret, timeout if timeout is not None else self.timeout)
        latency = (time.monotonic() - start) * 1000
        if result.ok:
            self.cache.put(vendor, secret, result)
        else:
            logger.info("Balance lookup for %s failed: %s", vendor, result.error)
        self._log("lookup", vendor, secret, result, latency)
        return result

    async def _request(self, source: BalanceSource, secret: str, timeout: float) -> BalanceResult:
        logger.debug("GET %s", source.endpoint)
        try:
            resp = await asyncio.wait_for(
                self._http().get(source.endpoint, headers=source.build_headers(secret), timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return source.failure(TIMEOUT_ERROR)
        except (httpx.HTTPError, OSError) as exc:
            return source.failure(f"Network error: {type(exc).__name__}: {exc}")
        except Exception as exc:
            logger.exception("Unexpected transport failure for %s", source.name)
            return source.failure(f"Unknown error occurred: {type(exc).__name__}: {exc}")

        if not resp.is_success:
            body = scrub(resp.text, secret)
            specific = source.interpret_error(resp.status_code, body)
            return source.failure(specific or f"API error: {resp.status_code} {resp.reason_phrase} - {body}")
        try:
            payload = resp.json()
        except ValueError:
            snippet = scrub(resp.text, secret)[:200]
            return source.failure(f"Invalid JSON in {source.display_name} balance response: {snippet}")
        return source.parse(payload)

    async def fetch_multiple(self, entries: Iterable[BalanceEntry]) -> dict[str, BalanceResult]:
        """Balances for many keys, keyed by each entry's caller-supplied id."""
        pending = list(entries)
        results: dict[str, BalanceResult] = {}
        for start in range(0, len(pending), self.batch_size):
            batch = pending[start:start + self.batch_size]
            outcomes = await asyncio.gather(
                *(self.fetch_balance(e.vendor_id, e.secret) for e in batch),
                return_exceptions=True,
            )
            for entry, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    outcome = BalanceResult.failure(f"{type(outcome).__name__}: {outcome}")
                results[entry.id] = outcome
            if start + self.batch_size < len(pending):
                await asyncio.sleep(self.batch_delay)
        if self.audit_log:
            self.audit_log.flush()
        return results

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_info(self) -> CacheInfo:
        return self.cache.info()
