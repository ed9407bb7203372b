"""Entry point for rate tracker application."""

import asyncio
import functools
import json
import logging
import sys

from rate_tracker.cli import build_parser
from rate_tracker.controller import CurrencyRateController
from rate_tracker.logging_setup import configure_debug_logging, configure_logging
from rate_tracker.runtime import RuntimeConfig, build_runtime_config
from rate_tracker.settings import Settings
from rate_tracker.sources import SOURCES, get_fetcher
from rate_tracker.state import RateState

logger = logging.getLogger(__name__)


def _log_rate(state: RateState) -> None:
    if state.pending_current_currency is not None or state.pending_native_currency is not None:
        return
    usd = f", {state.usd_conversion_rate} USD" if state.usd_conversion_rate is not None else ""
    logger.info(
        f"1 {state.native_currency.upper()} = {state.conversion_rate} "
        f"{state.current_currency.upper()}{usd} (as of {state.conversion_date})"
    )


def _build_controller(config: RuntimeConfig) -> CurrencyRateController:
    fetcher = functools.partial(get_fetcher(config.source), timeout=config.http_timeout)
    return CurrencyRateController(
        {
            "current_currency": config.current_currency,
            "native_currency": config.native_currency,
        },
        include_usd_rate=config.include_usd_rate,
        interval_ms=config.interval_ms,
        fetch_exchange_rate=fetcher,
    )


async def run_once(config: RuntimeConfig) -> int:
    """Fetch a single rate and print the persisted state."""
    controller = _build_controller(config)
    # Drop the initial poll before it runs; a single update is wanted here.
    controller.destroy()
    try:
        await controller.update_exchange_rate()
    except Exception as e:
        logger.error(f"Failed to fetch exchange rate: {e}")
        return 1
    print(json.dumps(controller.persisted_state()))
    return 0


async def run_tracker(config: RuntimeConfig) -> None:
    """Poll until cancelled, logging every committed rate."""
    controller = _build_controller(config)
    controller.subscribe(_log_rate)
    logger.info(
        f"Tracking {config.native_currency}/{config.current_currency} "
        f"every {config.interval_ms}ms via {config.source}"
    )
    try:
        # Block forever, keeping the poll loop running
        await asyncio.Event().wait()
    finally:
        controller.destroy()


def main() -> None:
    """Main entry point for rate tracker."""
    configure_logging()
    args = build_parser().parse_args()

    try:
        config = build_runtime_config(args, Settings(), set(SOURCES))
    except Exception as e:
        sys.exit(f"Configuration error: {e}")

    configure_debug_logging(config.debug_loggers)

    if config.once:
        sys.exit(asyncio.run(run_once(config)))

    logger.info("Starting rate tracker application...")

    try:
        asyncio.run(run_tracker(config))
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
