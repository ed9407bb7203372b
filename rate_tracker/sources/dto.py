"""Data Transfer Objects for price sources."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExchangeRate:
    conversion_rate: float  # price of one native unit in the reference currency
    conversion_date: int  # seconds since epoch, stamped after the response arrives
    usd_conversion_rate: float | None = None
