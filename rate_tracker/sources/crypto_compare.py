"""CryptoCompare price source.

API docs: https://min-api.cryptocompare.com/documentation?key=Price&cat=SingleSymbolPriceEndpoint
"""

import json
import logging
import math
import time

import httpx

from rate_tracker.exceptions import ValidationError
from rate_tracker.infrastructure import http_client
from rate_tracker.sources.dto import ExchangeRate

logger = logging.getLogger(__name__)

SOURCE_ID = "crypto_compare"
API_ENDPOINT = "https://min-api.cryptocompare.com/data/price"

USD = "USD"
USD_RATE_FIELD = "usdConversionRate"


def build_url(native_currency: str, targets: list[str]) -> str:
    return f"{API_ENDPOINT}?fsym={native_currency}&tsyms={','.join(targets)}"


def _is_valid_rate(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


async def fetch_exchange_rate(
    currency: str,
    native_currency: str,
    include_usd_rate: bool = False,
    *,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExchangeRate:
    """Fetch the price of one `native_currency` unit in `currency`.

    USD is requested in the same call when `include_usd_rate` is set. When
    `currency` is itself USD the primary rate doubles as the USD rate.

    Raises:
        FetchError: any HTTP status other than 200
        ValidationError: a requested rate is missing, negative or not a finite number,
            or the body is not JSON
        httpx.TransportError: network failure, unwrapped
    """
    currency = currency.upper()
    native_currency = native_currency.upper()

    is_usd = currency == USD
    targets = [currency]
    if include_usd_rate and not is_usd:
        targets.append(USD)

    url = build_url(native_currency, targets)
    logger.debug(f"Fetching {native_currency} price in {','.join(targets)} from {SOURCE_ID}")

    try:
        payload = await http_client.get(url, timeout=timeout, transport=transport)
    except json.JSONDecodeError as e:
        raise ValidationError(currency, e.doc) from e
    conversion_date = int(time.time())
    prices = payload if isinstance(payload, dict) else {}

    conversion_rate = prices.get(currency)
    if not _is_valid_rate(conversion_rate):
        raise ValidationError(currency, conversion_rate)

    usd_conversion_rate = None
    if is_usd:
        usd_conversion_rate = conversion_rate
    elif include_usd_rate:
        usd_conversion_rate = prices.get(USD)
        if not _is_valid_rate(usd_conversion_rate):
            raise ValidationError(USD_RATE_FIELD, usd_conversion_rate)

    return ExchangeRate(
        conversion_rate=float(conversion_rate),
        conversion_date=conversion_date,
        usd_conversion_rate=float(usd_conversion_rate) if usd_conversion_rate is not None else None,
    )
