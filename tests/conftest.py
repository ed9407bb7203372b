"""Shared fixtures and helpers for rate tracker tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from rate_tracker.sources.dto import ExchangeRate


class StubFetcher:
    """Records calls and returns a fixed rate, optionally raising or waiting on a gate."""

    def __init__(
        self,
        conversion_rate: float = 10.0,
        usd_conversion_rate: float | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.conversion_rate = conversion_rate
        self.usd_conversion_rate = usd_conversion_rate
        self.error = error
        self.gate = gate
        self.calls: list[tuple[str, str, bool]] = []

    async def __call__(
        self, currency: str, native_currency: str, include_usd_rate: bool = False
    ) -> ExchangeRate:
        self.calls.append((currency, native_currency, include_usd_rate))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return ExchangeRate(
            conversion_rate=self.conversion_rate,
            conversion_date=1_700_000_000 + len(self.calls),
            usd_conversion_rate=self.usd_conversion_rate,
        )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


def json_transport(payload: object, status_code: int = 200) -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(status_code, json=payload))
