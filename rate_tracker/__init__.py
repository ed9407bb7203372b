"""Periodic exchange rate synchronization for a native asset and a reference currency."""

from rate_tracker.controller import CurrencyRateController
from rate_tracker.exceptions import FetchError, RateTrackerError, TransportError, ValidationError
from rate_tracker.sources.dto import ExchangeRate
from rate_tracker.state import RateState

__all__ = [
    "CurrencyRateController",
    "ExchangeRate",
    "FetchError",
    "RateState",
    "RateTrackerError",
    "TransportError",
    "ValidationError",
]
