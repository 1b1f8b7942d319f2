"""Rich table rendering and canonical JSON file output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console
from rich.table import Table

from tokerz.catalog import format_currency, format_pricing
from tokerz.models import BalanceResult, CacheInfo, DetectionResult, FormatCheck, ProviderProfile
from tokerz.security import check_output_permissions


def _confidence_color(confidence: float) -> str:
    if confidence >= 0.9:
        return "green"
    if confidence >= 0.7:
        return "yellow"
    return "red"


def format_balance(result: BalanceResult) -> str:
    if result.currency == "USD":
        return format_currency(result.balance)
    if result.currency == "characters":
        return f"{result.balance:,.0f} characters"
    return f"{result.balance:,.2f} {result.currency}"


def render_detection(
    key_display: str,
    check: FormatCheck,
    result: DetectionResult,
    explanation: str,
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    table = Table(title="Key Classification", show_lines=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Key", key_display)
    table.add_row("Format", "[green]valid[/green]" if check.is_valid else f"[red]{check.error}[/red]")
    if result.provider:
        color = _confidence_color(result.confidence)
        table.add_row("Provider", result.provider)
        table.add_row("Confidence", f"[{color}]{result.confidence:.2f}[/{color}]")
        table.add_row("Pattern", result.matched_pattern or "")
        table.add_row("Suggestions", ", ".join(result.suggestions))
    else:
        table.add_row("Provider", "[dim]unknown[/dim]")
    table.add_row("Summary", explanation)
    console.print(table)


def render_balances(
    rows: Iterable[tuple[str, str, str, BalanceResult]],
    console: Optional[Console] = None,
) -> None:
    """rows: (label, provider id, redacted key, result)."""
    console = console or Console()
    table = Table(title="Wallet Balances", show_lines=True)
    table.add_column("Key", style="cyan")
    table.add_column("Provider")
    table.add_column("Fingerprint")
    table.add_column("Balance")
    table.add_column("Updated / Error")
    for label, provider, fingerprint, result in rows:
        if result.ok:
            balance = f"[green]{format_balance(result)}[/green]"
            detail = result.last_updated or ""
        else:
            balance = "[dim]-[/dim]"
            detail = f"[red]{result.error}[/red]"
        table.add_row(label, provider, fingerprint, balance, detail)
    console.print(table)


def render_profiles(
    profiles: Iterable[ProviderProfile],
    supported: set[str],
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    profiles = list(profiles)
    table = Table(title=f"Providers ({len(profiles)})", show_lines=False)
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Company")
    table.add_column("Category")
    table.add_column("Key Format")
    table.add_column("Input Price")
    table.add_column("Balance")
    for p in profiles:
        price = format_pricing(p.input_pricing) if p.input_pricing is not None else "-"
        balance = "[green]yes[/green]" if p.id.split("-", 1)[0] in supported else ""
        table.add_row(p.id, p.display_name, p.company, p.category, p.key_format, price, balance)
    console.print(table)


def render_cache_info(info: CacheInfo, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(
        f"  [dim]cache: {info.total_entries} entries, {info.hits} hits / {info.misses} misses[/dim]"
    )


def write_json(
    payload: Union[dict, list],
    path: Path,
    force_insecure: bool = False,
    console: Optional[Console] = None,
) -> bool:
    """Write canonical JSON. Returns True on success."""
    console = console or Console(stderr=True)
    if not check_output_permissions(path, force=force_insecure):
        console.print(
            f"[red]Refusing to write to {path}: world-readable or a symlink. "
            f"Use --force-insecure-output to override.[/red]"
        )
        return False
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
    console.print(f"[green]Results written to {path}[/green]")
    return True
