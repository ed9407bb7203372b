"""Logging setup helpers for rate tracker startup."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure base logging and quiet the HTTP stack."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def configure_debug_logging(loggers_spec: str | None) -> None:
    """Enable DEBUG logs for rate_tracker sub-loggers, e.g. "controller,sources"."""
    names = _parse_csv(loggers_spec)
    for name in names:
        logging.getLogger(f"rate_tracker.{name}").setLevel(logging.DEBUG)
    if names:
        logger.info("Enabling DEBUG logging for: %s", names)


def _parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
