"""Exchange rate state record and its store."""

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


def _persist(default: Any) -> Any:
    return field(default=default, metadata={"persist": True})


def _runtime(default: Any) -> Any:
    return field(default=default, metadata={"persist": False})


@dataclass(frozen=True)
class RateState:
    """Snapshot of the synchronized exchange rate.

    Attributes:
        conversion_date: Seconds since epoch of the last successful fetch
        conversion_rate: Price of one native unit in the current currency
        current_currency: Reference currency code the rate is expressed in
        native_currency: Symbol of the asset being priced
        pending_current_currency: Currency being switched to, if any
        pending_native_currency: Native asset being switched to, if any
        usd_conversion_rate: Price of one native unit in USD, when tracked
    """

    conversion_date: int = _persist(0)
    conversion_rate: float = _persist(0)
    current_currency: str = _persist("usd")
    native_currency: str = _persist("ETH")
    pending_current_currency: str | None = _runtime(None)
    pending_native_currency: str | None = _runtime(None)
    usd_conversion_rate: float | None = _runtime(None)


PERSISTED_FIELDS = tuple(f.name for f in dataclasses.fields(RateState) if f.metadata["persist"])

StateListener = Callable[[RateState], None]


class RateStateStore:
    """Owns the current RateState snapshot and notifies listeners on change.

    Snapshots are immutable; replace() swaps in a new one in a single step,
    so readers never see a partially applied update.
    """

    def __init__(self, state: RateState) -> None:
        self._state = state
        self._listeners: list[StateListener] = []

    def read(self) -> RateState:
        return self._state

    def replace(self, **changes: Any) -> RateState:
        self._state = dataclasses.replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}", exc_info=True)
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register `listener`; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def persisted_state(self) -> dict[str, Any]:
        """Fields that survive a restart; pending fields and the USD rate are runtime only."""
        return {name: getattr(self._state, name) for name in PERSISTED_FIELDS}

    def teardown(self) -> None:
        self._listeners.clear()


def build_initial_state(overrides: dict[str, Any] | None = None) -> RateState:
    """Merge `overrides` over the defaults.

    Raises:
        TypeError: If overrides contain a key that is not a RateState field
    """
    return RateState(**(overrides or {}))
