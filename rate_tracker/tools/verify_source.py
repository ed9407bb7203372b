"""Price source verification CLI."""

import argparse
import asyncio
import sys
import time

from rich.console import Console
from rich.table import Table

from rate_tracker.sources import SOURCES
from rate_tracker.sources.dto import ExchangeRate

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify price source with a real API call")
    parser.add_argument(
        "source_id",
        nargs="?",
        help="Source ID from SOURCES registry (for example: crypto_compare)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available source IDs and exit",
    )
    parser.add_argument(
        "--currency",
        default="USD",
        help="Reference currency to request (default: USD)",
    )
    parser.add_argument(
        "--native",
        default="ETH",
        help="Native asset to price (default: ETH)",
    )
    parser.add_argument(
        "--include-usd",
        action="store_true",
        help="Request the USD rate alongside the reference currency",
    )
    return parser


def _render_rate(rate: ExchangeRate, currency: str, native_currency: str) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row(f"1 {native_currency.upper()} in {currency.upper()}", str(rate.conversion_rate))
    table.add_row(
        f"1 {native_currency.upper()} in USD",
        "-" if rate.usd_conversion_rate is None else str(rate.usd_conversion_rate),
    )
    table.add_row("Conversion date", str(rate.conversion_date))

    console.print(table)


async def verify_source(
    source_id: str,
    currency: str,
    native_currency: str,
    include_usd_rate: bool,
) -> bool:
    console.print(f"\n[bold cyan]Verifying price source: {source_id}[/bold cyan]\n")

    if source_id not in SOURCES:
        available = ", ".join(sorted(SOURCES.keys()))
        console.print(
            f"[bold red][FAIL][/bold red] Source '{source_id}' "
            "not found in SOURCES registry.\n"
            f"Available sources: {available}"
        )
        return False

    source = SOURCES[source_id]
    console.print(f"  [green][OK][/green] SOURCE_ID: {source.SOURCE_ID}")

    console.print(
        f"\n[bold]API - fetch_exchange_rate()[/bold] for "
        f"[cyan]{native_currency.upper()}/{currency.upper()}[/cyan]"
    )
    try:
        before = int(time.time())
        rate = await source.fetch_exchange_rate(currency, native_currency, include_usd_rate)
    except Exception as exc:
        console.print(f"  [bold red][FAIL][/bold red] fetch_exchange_rate() failed: {exc}")
        return False

    _render_rate(rate, currency, native_currency)

    warnings = []
    if rate.conversion_rate <= 0:
        warnings.append("Source returned a non-positive rate")
    if rate.conversion_date < before:
        warnings.append("Conversion date is older than the request")

    for warning in warnings:
        console.print(f"  [yellow][WARN][/yellow] {warning}")

    if warnings:
        console.print(
            f"\n[bold yellow][OK] Checks passed for {source_id} "
            f"with {len(warnings)} warning(s)[/bold yellow]\n"
        )
    else:
        console.print(f"\n[bold green][OK] All checks passed for {source_id}[/bold green]\n")
    return True


async def amain(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list:
        console.print("Available source IDs:")
        for source_id in sorted(SOURCES.keys()):
            console.print(f"  - {source_id}")
        return 0

    if args.source_id is None:
        parser.print_help()
        console.print("\nExample: rate-tracker-verify crypto_compare --currency cad")
        return 1

    success = await verify_source(
        source_id=args.source_id,
        currency=args.currency,
        native_currency=args.native,
        include_usd_rate=args.include_usd,
    )
    return 0 if success else 1


def main() -> int:
    return asyncio.run(amain())


def entrypoint() -> None:
    sys.exit(main())
