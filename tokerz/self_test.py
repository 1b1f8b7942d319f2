"""Self-test suite: classifier and aggregator guarantees against a mock transport.

All checks are deterministic. No network calls and no real credentials are used.
"""

from __future__ import annotations

import asyncio
import time
from typing import ClassVar, Optional

import httpx
from rich.console import Console

from tokerz.aggregator import BalanceAggregator
from tokerz.balances import BalanceSource, discover_sources
from tokerz.detection import classify
from tokerz.models import RateLimitSpec

DEEPSEEK_REPLY = {"is_available": True, "balance_infos": [{"currency": "USD", "total_balance": "12.50"}]}


class MockTransport(httpx.AsyncBaseTransport):
    """Routes by URL substring and records (url, monotonic time) per request."""

    def __init__(self, responses: dict[str, tuple[int, object]]):
        # url_pattern -> (status_code, json body or raw text)
        self._responses = responses
        self.calls: list[tuple[str, float]] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append((url, time.monotonic()))
        for pattern, (code, body) in self._responses.items():
            if pattern in url:
                if isinstance(body, str):
                    return httpx.Response(status_code=code, text=body, request=request)
                return httpx.Response(status_code=code, json=body, request=request)
        return httpx.Response(status_code=500, json={"error": "no mock"}, request=request)


class HangingTransport(httpx.AsyncBaseTransport):
    """Never answers; only cancellation ends a request."""

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await asyncio.Event().wait()
        return httpx.Response(status_code=504, request=request)


def _report(console: Console, label: str, ok: bool, extra: str = "") -> bool:
    verdict = "[green]PASS[/green]" if ok else "[red]FAIL[/red]"
    console.print(f"  {label}: {verdict}{f' ({extra})' if extra else ''}")
    return ok


async def _check_classifier_total(console: Console) -> bool:
    samples = ["", "short", " " * 50, "sk-ant-" + "a" * 32, "AIza" + "B" * 35, "\x00" * 300, "sk-" + "f" * 48]
    ok = True
    for sample in samples:
        result = classify(sample)
        ok = ok and 0.0 <= result.confidence <= 1.0 and len(result.suggestions) <= 3
    return _report(console, "classify is total, confidence in [0, 1]", ok)


async def _check_cache_single_call(console: Console) -> bool:
    transport = MockTransport({"api.deepseek.com": (200, DEEPSEEK_REPLY)})
    async with httpx.AsyncClient(transport=transport) as client:
        agg = BalanceAggregator(client=client)
        first = await agg.fetch_balance("deepseek-r1", "sk-" + "a" * 32)
        second = await agg.fetch_balance("deepseek", "sk-" + "a" * 32)
    ok = first.ok and first == second and len(transport.calls) == 1
    return _report(console, "second lookup within TTL served from cache", ok)


async def _check_rate_limit(console: Console) -> bool:
    transport = MockTransport({"api.deepseek.com": (200, DEEPSEEK_REPLY)})
    async with httpx.AsyncClient(transport=transport) as client:
        agg = BalanceAggregator(client=client, rate_limits={"deepseek": RateLimitSpec(2, 60)})
        results = [await agg.fetch_balance("deepseek", "sk-" + "b" * 32, skip_cache=True) for _ in range(3)]
    ok = results[0].ok and results[1].ok and "Rate limit" in (results[2].error or "") and len(transport.calls) == 2
    return _report(console, "fixed window refuses request N+1 without network", ok)


async def _check_timeout(console: Console) -> bool:
    async with httpx.AsyncClient(transport=HangingTransport()) as client:
        agg = BalanceAggregator(client=client)
        start = time.monotonic()
        result = await agg.fetch_balance("deepseek", "sk-" + "c" * 32, timeout=0.05)
        elapsed_ms = (time.monotonic() - start) * 1000
    ok = "timeout" in (result.error or "").lower() and elapsed_ms < 1000
    return _report(console, "hung transport ends in a timeout error", ok, f"{elapsed_ms:.0f}ms")


async def _check_unsupported_offline(console: Console) -> bool:
    transport = MockTransport({})
    async with httpx.AsyncClient(transport=transport) as client:
        agg = BalanceAggregator(client=client)
        unknown = await agg.fetch_balance("midjourney-v6", "mj-" + "d" * 24)
        usage_billed = await agg.fetch_balance("openai-gpt4o", "sk-" + "D" * 40)
    ok = bool(unknown.error) and bool(usage_billed.error) and not transport.calls
    return _report(console, "unsupported vendors answer without network", ok)


async def _check_zero_touch_source(console: Console) -> bool:
    discover_sources()
    before = set(BalanceSource.get_registry())

    class _DummySource(BalanceSource):
        name: ClassVar[str] = "selftestdummy"
        display_name: ClassVar[str] = "Dummy"
        endpoint: ClassVar[str] = "https://dummy.invalid/balance"
        rate_limit: ClassVar[Optional[RateLimitSpec]] = None

        def build_headers(self, secret: str) -> dict[str, str]:
            return {"Authorization": f"Bearer {secret}"}

    ok = "selftestdummy" in BalanceSource.get_registry() and "selftestdummy" not in before
    BalanceSource._registry.pop("selftestdummy", None)
    return _report(console, "new balance source registers by subclassing", ok)


async def run_self_test(console: Optional[Console] = None) -> bool:
    """Run all checks. Returns True if all pass."""
    console = console or Console()
    console.print("\n[bold]Running self-test suite...[/bold]\n")
    checks = [
        _check_classifier_total,
        _check_cache_single_call,
        _check_rate_limit,
        _check_timeout,
        _check_unsupported_offline,
        _check_zero_touch_source,
    ]
    results = [await check(console) for check in checks]
    console.print(f"\n[bold]Results: {sum(results)}/{len(results)} passed[/bold]")
    return all(results)
