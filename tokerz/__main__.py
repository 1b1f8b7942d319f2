"""CLI entry point: python -m tokerz.

Usage:
    python -m tokerz --classify sk-ant-...
    python -m tokerz --balance sk-... [--vendor deepseek] [--skip-cache]
    python -m tokerz --env .env --output balances.json
    python -m tokerz --list-providers --category reasoning
    python -m tokerz --cost deepseek-r1 --input-tokens 120000 --output-tokens 8000
    python -m tokerz --self-test
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from tokerz.aggregator import DEFAULT_TIMEOUT, BalanceAggregator, supported_balance_providers, supports_balance
from tokerz.audit_log import AuditLog
from tokerz.catalog import find_profile, format_currency, format_usage, profiles_by_category, unique_categories
from tokerz.detection import classify, explain, validate_format
from tokerz.models import BalanceEntry, UsageEvent
from tokerz.output import render_balances, render_cache_info, render_detection, render_profiles, write_json
from tokerz.security import redact_key
from tokerz.usage import calculate_usage_cost


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tokerz",
        description="Classify AI-provider API keys and look up their wallet balances.",
    )
    mode = p.add_argument_group("modes")
    mode.add_argument("--classify", metavar="KEY", help="Detect the provider of KEY and validate its format")
    mode.add_argument("--balance", metavar="KEY", help="Look up the wallet balance behind KEY")
    mode.add_argument("--env", type=Path, help="Look up balances for every detectable key in a .env file")
    mode.add_argument("--list-providers", action="store_true", help="List known providers and exit")
    mode.add_argument("--cost", metavar="PROVIDER", help="Estimate the cost of usage on PROVIDER")
    mode.add_argument("--self-test", action="store_true", help="Run the offline self-test suite")
    mode.add_argument("--version", action="store_true", help="Show version and exit")

    p.add_argument("--vendor", help="Provider id to use with --balance instead of auto-detection")
    p.add_argument("--skip-cache", action="store_true", help="Bypass the balance cache")
    p.add_argument("--category", choices=unique_categories(), help="Filter --list-providers by category")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                   help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT:g})")

    usage = p.add_argument_group("usage figures for --cost")
    usage.add_argument("--input-tokens", type=int)
    usage.add_argument("--output-tokens", type=int)
    usage.add_argument("--tokens", type=int, dest="total_tokens")
    usage.add_argument("--characters", type=int)
    usage.add_argument("--images", type=int)
    usage.add_argument("--seconds", type=float, dest="audio_seconds")
    usage.add_argument("--requests", type=int)

    p.add_argument("--json", action="store_true", help="Print JSON results to stdout")
    p.add_argument("--output", type=Path, help="Write JSON results to file")
    p.add_argument("--force-insecure-output", action="store_true", help="Skip file permission check")
    p.add_argument("--log", type=Path, help="Append structured lookup events to this file")
    p.add_argument("--quiet", "-q", action="store_true", help="Suppress table output, only exit code")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _emit(payload: object, args: argparse.Namespace, console: Console) -> bool:
    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    if args.output:
        return write_json(payload, args.output, force_insecure=args.force_insecure_output, console=console)
    return True


def _cmd_classify(args: argparse.Namespace, console: Console) -> int:
    key = args.classify
    check = validate_format(key)
    result = classify(key)
    if not args.quiet and not args.json:
        render_detection(redact_key(key.strip()), check, result, explain(result), console)
    payload = {"format": check.to_dict(), "detection": result.to_dict(), "explanation": explain(result)}
    if not _emit(payload, args, console):
        return 2
    return 0 if check.is_valid and result.provider else 1


def _cmd_list_providers(args: argparse.Namespace, console: Console) -> int:
    profiles = profiles_by_category(args.category)
    if not args.quiet and not args.json:
        render_profiles(profiles, set(supported_balance_providers()), console)
    if not _emit([p.to_dict() for p in profiles], args, console):
        return 2
    return 0


def _cmd_cost(args: argparse.Namespace, console: Console) -> int:
    profile = find_profile(args.cost)
    if profile is None:
        console.print(f"[red]Unknown provider: {args.cost}[/red]")
        return 2
    event = UsageEvent(
        input_tokens=args.input_tokens,
        output_tokens=args.output_tokens,
        total_tokens=args.total_tokens,
        characters=args.characters,
        images=args.images,
        audio_seconds=args.audio_seconds,
        requests=args.requests,
    )
    calc = calculate_usage_cost(profile.id, event)
    if not args.quiet and not args.json:
        console.print(
            f"  [bold]{profile.display_name}[/bold]: {format_usage(calc.amount, calc.unit)} "
            f"→ [green]{format_currency(calc.cost_usd)}[/green]"
        )
        for name, value in calc.breakdown.items():
            console.print(f"    [dim]{name}: {format_currency(value)}[/dim]")
    if not _emit({"provider": profile.id, **calc.to_dict()}, args, console):
        return 2
    return 0


async def _lookup_one(args: argparse.Namespace, console: Console, alog: Optional[AuditLog]) -> int:
    key = args.balance.strip()
    check = validate_format(key)
    if not check.is_valid:
        console.print(f"[red]{check.error}[/red]")
        return 1
    vendor = args.vendor or classify(key).provider
    if not vendor:
        console.print("[red]Could not detect the provider of this key. Pass --vendor.[/red]")
        return 1
    async with BalanceAggregator(timeout=args.timeout, audit_log=alog) as agg:
        result = await agg.fetch_balance(vendor, key, skip_cache=args.skip_cache)
    if not args.quiet and not args.json:
        render_balances([("--balance", vendor, redact_key(key), result)], console)
    payload = {"provider": vendor, "key": redact_key(key), **result.to_dict()}
    if not _emit(payload, args, console):
        return 2
    return 0 if result.ok else 1


async def _lookup_env(args: argparse.Namespace, console: Console, alog: Optional[AuditLog]) -> int:
    from dotenv import dotenv_values

    entries: list[BalanceEntry] = []
    providers: dict[str, str] = {}
    skipped: list[str] = []
    for var, value in dotenv_values(args.env).items():
        if not var or not value:
            continue
        value = value.strip()
        if not validate_format(value).is_valid:
            continue
        provider = classify(value).provider
        if provider and supports_balance(provider):
            entries.append(BalanceEntry(id=var, vendor_id=provider, secret=value))
            providers[var] = provider
        elif provider:
            skipped.append(var)

    if not entries:
        console.print("[yellow]No keys with a balance API found.[/yellow]")
        return 0

    async with BalanceAggregator(timeout=args.timeout, audit_log=alog) as agg:
        results = await agg.fetch_multiple(entries)
        info = agg.get_cache_info()

    secrets = {e.id: e.secret for e in entries}
    if not args.quiet and not args.json:
        render_balances(
            [(var, providers[var], redact_key(secrets[var]), res) for var, res in sorted(results.items())],
            console,
        )
        if skipped:
            console.print(f"  [dim]{len(skipped)} keys skipped (provider has no balance API)[/dim]")
        render_cache_info(info, console)

    payload = {
        var: {"provider": providers[var], "key": redact_key(secrets[var]), **res.to_dict()}
        for var, res in sorted(results.items())
    }
    if not _emit(payload, args, console):
        return 2
    return 0 if all(r.ok for r in results.values()) else 1


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    console = Console(quiet=args.quiet)
    _configure_logging(args.verbose)

    if args.version:
        from tokerz import __version__
        console.print(f"tokerz {__version__}")
        return 0

    if args.list_providers:
        return _cmd_list_providers(args, console)

    if args.self_test:
        from tokerz.self_test import run_self_test
        return 0 if asyncio.run(run_self_test(console)) else 1

    if args.classify is not None:
        return _cmd_classify(args, console)

    if args.cost:
        return _cmd_cost(args, console)

    alog = AuditLog(args.log) if args.log else None

    if args.balance is not None:
        return asyncio.run(_lookup_one(args, console, alog))

    if args.env:
        if not args.env.exists():
            console.print(f"[red]File not found: {args.env}[/red]")
            return 2
        return asyncio.run(_lookup_env(args, console, alog))

    console.print("[red]Nothing to do: pass --classify, --balance, --env, --list-providers, --cost or --self-test[/red]")
    return 2


if __name__ == "__main__":
    sys.exit(main())
