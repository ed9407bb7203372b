"""Currency rate controller.

Keeps the conversion rate between a native asset and a reference currency
up to date by polling a price source, and lets callers switch either
currency while an update may be in flight.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from rate_tracker.sources import crypto_compare
from rate_tracker.sources.protocol import RateFetcher
from rate_tracker.state import RateState, RateStateStore, StateListener, build_initial_state

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 180_000


def _resolve(pending: str | None, current: str) -> str:
    return pending if pending is not None else current


def _settle_pending(latest: str | None, seen: str | None) -> str | None:
    # A switch requested while the fetch was in flight queued its own update.
    return None if latest == seen else latest


class CurrencyRateController:
    """Polls on a fixed delay for the rate from the native asset to the current currency.

    Every update, scheduled or explicit, runs under one asyncio.Lock, so
    attempts are applied one at a time in the order they queued. The poll
    loop is a task on the running event loop; constructing the controller
    outside a running loop raises RuntimeError.

    Args:
        state: Partial initial state merged over the defaults
        include_usd_rate: Also track the USD rate on every update
        interval_ms: Delay between the end of one poll and the start of the next
        fetch_exchange_rate: Price source used for every update
    """

    def __init__(
        self,
        state: dict[str, Any] | None = None,
        *,
        include_usd_rate: bool = False,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        fetch_exchange_rate: RateFetcher = crypto_compare.fetch_exchange_rate,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be greater than 0")

        self._store = RateStateStore(build_initial_state(state))
        self._include_usd_rate = include_usd_rate
        self._interval_ms = interval_ms
        self._fetch_exchange_rate = fetch_exchange_rate
        self._lock = asyncio.Lock()
        self._loop = asyncio.get_running_loop()
        self._poll_task: asyncio.Task[None] | None = None
        self._destroyed = False

        self._schedule_poll(delay=0)

    @property
    def state(self) -> RateState:
        return self._store.read()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def include_usd_rate(self) -> bool:
        return self._include_usd_rate

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    def persisted_state(self) -> dict[str, Any]:
        return self._store.persisted_state()

    def destroy(self) -> None:
        """Stop polling and drop listeners.

        An update already in flight still runs to completion.
        """
        if self._destroyed:
            return
        self._destroyed = True
        self._cancel_poll()
        self._store.teardown()
        logger.debug("Currency rate controller destroyed")

    async def set_current_currency(self, currency: str) -> RateState:
        """Switch the reference currency and update the rate.

        The pending value stays set if the fetch fails, so the next poll retries it.
        """
        self._store.replace(pending_current_currency=currency)
        return await self.update_exchange_rate()

    async def set_native_currency(self, native_currency: str) -> RateState:
        """Switch the native asset and update the rate."""
        self._store.replace(pending_native_currency=native_currency)
        return await self.update_exchange_rate()

    async def poll(self) -> None:
        """Update now, then restart the poll cadence. Never raises on fetch failure."""
        self._cancel_poll()
        await self._update_safely()
        if not self._destroyed:
            self._schedule_poll(delay=self._interval_ms / 1000)

    async def update_exchange_rate(self) -> RateState:
        """Fetch the rate for the pending (or current) currencies and commit it.

        Raises whatever the price source raises; state is left untouched.
        """
        async with self._lock:
            snapshot = self._store.read()
            current_currency = _resolve(
                snapshot.pending_current_currency, snapshot.current_currency
            )
            native_currency = _resolve(snapshot.pending_native_currency, snapshot.native_currency)

            rate = await self._fetch_exchange_rate(
                current_currency, native_currency, self._include_usd_rate
            )

            latest = self._store.read()
            new_state = self._store.replace(
                conversion_date=rate.conversion_date,
                conversion_rate=rate.conversion_rate,
                current_currency=current_currency,
                native_currency=native_currency,
                pending_current_currency=_settle_pending(
                    latest.pending_current_currency, snapshot.pending_current_currency
                ),
                pending_native_currency=_settle_pending(
                    latest.pending_native_currency, snapshot.pending_native_currency
                ),
                usd_conversion_rate=rate.usd_conversion_rate,
            )

        logger.debug(
            f"Updated {native_currency}/{current_currency} rate: {rate.conversion_rate} "
            f"(usd: {rate.usd_conversion_rate})"
        )
        return new_state

    def _schedule_poll(self, delay: float) -> None:
        self._cancel_poll()
        self._poll_task = self._loop.create_task(self._poll_loop(delay))

    def _cancel_poll(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
        self._poll_task = None

    async def _poll_loop(self, delay: float) -> None:
        while True:
            if delay > 0:
                await asyncio.sleep(delay)
            # Cancelling the loop must not abort an update that is already running.
            await asyncio.shield(self._update_safely())
            delay = self._interval_ms / 1000

    async def _update_safely(self) -> None:
        try:
            await self.update_exchange_rate()
        except Exception as e:
            logger.error(f"Failed to update exchange rate: {e}", exc_info=True)
