"""Price source registry.

Each source is a module exposing SOURCE_ID and an async
fetch_exchange_rate() implementing the RateFetcher protocol.

To add a new source:
1. Create sources/{source_name}.py with SOURCE_ID and fetch_exchange_rate()
2. Import the module here and add it to the registry below
3. validate_source() checks the module at import time
"""

import inspect
import logging
from types import ModuleType

from rate_tracker.sources import crypto_compare
from rate_tracker.sources.dto import ExchangeRate
from rate_tracker.sources.protocol import RateFetcher

logger = logging.getLogger(__name__)


def validate_source(module: ModuleType, name: str) -> None:
    """Fail fast if a source module does not implement the expected interface.

    Raises:
        TypeError: If SOURCE_ID is missing or not a str, or fetch_exchange_rate()
            is missing or not a coroutine function
    """
    if not hasattr(module, "SOURCE_ID"):
        raise TypeError(f"{name}: missing required attribute SOURCE_ID")

    if not isinstance(module.SOURCE_ID, str):
        raise TypeError(f"{name}: SOURCE_ID must be str, got {type(module.SOURCE_ID)}")

    fetch = getattr(module, "fetch_exchange_rate", None)
    if fetch is None:
        raise TypeError(f"{name}: missing required function fetch_exchange_rate()")

    if not inspect.iscoroutinefunction(fetch):
        raise TypeError(f"{name}: fetch_exchange_rate() must be async")

    logger.debug(f"{name}: validated")


def _build_registry() -> dict[str, ModuleType]:
    sources = {
        crypto_compare.SOURCE_ID: crypto_compare,
    }

    registry = {}
    for name, module in sources.items():
        validate_source(module, name)
        registry[name] = module

    return registry


# Registry mapping source_id to source module (with validation)
SOURCES: dict[str, ModuleType] = _build_registry()

DEFAULT_SOURCE = crypto_compare.SOURCE_ID


def get_fetcher(source_id: str) -> RateFetcher:
    """Return the fetch callable of a registered source.

    Raises:
        KeyError: If source_id is not registered
    """
    return SOURCES[source_id].fetch_exchange_rate


__all__ = ["SOURCES", "DEFAULT_SOURCE", "ExchangeRate", "RateFetcher", "get_fetcher"]
