"""CLI argument parsing for rate tracker."""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser used by the main entrypoint."""
    parser = argparse.ArgumentParser(
        description="Rate tracker - keeps a native asset's exchange rate in sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Track ETH in USD every 3 minutes (default)
  rate-tracker

  # Track BTC in CAD, also keeping the USD rate, every 30 seconds
  rate-tracker --currency cad --native btc --include-usd --interval-ms 30000

  # Fetch once and print the persisted state as JSON
  rate-tracker --currency eur --once

Environment Variables:
  CURRENT_CURRENCY     Reference currency (overridden by CLI)
  NATIVE_CURRENCY      Native asset symbol (overridden by CLI)
  INCLUDE_USD_RATE     Also track the USD rate (true/false)
  POLL_INTERVAL_MS     Delay between polls in milliseconds
  RATE_SOURCE          Registered price source ID
  HTTP_TIMEOUT         HTTP timeout in seconds
  DEBUG_LOGGERS        Comma-separated rate_tracker sub-loggers for DEBUG logging
        """,
    )

    parser.add_argument(
        "--currency",
        type=str,
        default=None,
        help="Reference currency code the rate is expressed in.",
    )
    parser.add_argument(
        "--native",
        type=str,
        default=None,
        help="Symbol of the asset being priced.",
    )
    parser.add_argument(
        "--include-usd",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Also track the USD rate.",
    )
    parser.add_argument(
        "--interval-ms",
        type=int,
        default=None,
        help="Delay between polls in milliseconds.",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Price source ID (default: crypto_compare).",
    )
    parser.add_argument(
        "--debug-loggers",
        type=str,
        default=None,
        help="Comma-separated rate_tracker sub-loggers for DEBUG logging.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch a single rate, print the persisted state as JSON and exit.",
    )

    return parser
