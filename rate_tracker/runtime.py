"""Runtime configuration building for rate tracker startup."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import TypeVar

from rate_tracker.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RuntimeConfig:
    """Resolved startup configuration after CLI/ENV merge."""

    current_currency: str
    native_currency: str
    include_usd_rate: bool
    interval_ms: int
    source: str
    http_timeout: float
    debug_loggers: str | None
    once: bool


def build_runtime_config(
    args: argparse.Namespace, settings: Settings, all_sources: set[str]
) -> RuntimeConfig:
    """Resolve final runtime configuration used by main()."""
    current_currency = _pick(args.currency, settings.current_currency).strip()
    native_currency = _pick(args.native, settings.native_currency).strip()
    include_usd_rate = _pick(args.include_usd, settings.include_usd_rate)
    interval_ms = _pick(args.interval_ms, settings.interval_ms)
    source = _pick(args.source, settings.source).strip()
    debug_loggers = _pick(args.debug_loggers, settings.debug_loggers)

    if not current_currency:
        raise ValueError("CURRENT_CURRENCY must not be empty")
    if not native_currency:
        raise ValueError("NATIVE_CURRENCY must not be empty")
    if interval_ms <= 0:
        raise ValueError("POLL_INTERVAL_MS must be greater than 0")
    if settings.http_timeout <= 0:
        raise ValueError("HTTP_TIMEOUT must be greater than 0")
    if source not in all_sources:
        raise ValueError(
            f"Unknown RATE_SOURCE '{source}'. Available sources: {sorted(all_sources)}"
        )

    logger.debug(
        f"Resolved runtime config: {native_currency}/{current_currency} "
        f"every {interval_ms}ms via {source}"
    )

    return RuntimeConfig(
        current_currency=current_currency,
        native_currency=native_currency,
        include_usd_rate=include_usd_rate,
        interval_ms=interval_ms,
        source=source,
        http_timeout=settings.http_timeout,
        debug_loggers=debug_loggers,
        once=args.once,
    )


def _pick(cli_value: T | None, env_value: T) -> T:
    return cli_value if cli_value is not None else env_value
