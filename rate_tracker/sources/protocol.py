"""Price source protocol.

Sources are plain async callables; the controller accepts any of them.
"""

from typing import Protocol, runtime_checkable

from rate_tracker.sources.dto import ExchangeRate


@runtime_checkable
class RateFetcher(Protocol):
    """Contract for price sources.

    Currency codes may arrive in any case; sources normalize them before
    building the request and before reading the response.
    """

    async def __call__(
        self, currency: str, native_currency: str, include_usd_rate: bool = False
    ) -> ExchangeRate: ...
