"""Tests for the CryptoCompare price source."""

import re
import time

import httpx
import pytest

from rate_tracker.exceptions import FetchError, ValidationError
from rate_tracker.sources import crypto_compare
from rate_tracker.sources.crypto_compare import fetch_exchange_rate
from tests.conftest import RecordingTransport, json_transport

PRICE_URL = "https://min-api.cryptocompare.com/data/price"


def _tsyms(transport: RecordingTransport) -> list[str]:
    return [request.url.params["tsyms"] for request in transport.requests]


@pytest.mark.asyncio
async def test_returns_cad_conversion_rate():
    transport = json_transport({"CAD": 2000.42})

    rate = await fetch_exchange_rate("CAD", "ETH", transport=transport)

    assert rate.conversion_rate == 2000.42
    request = transport.requests[0]
    assert request.method == "GET"
    assert str(request.url).startswith(PRICE_URL)
    assert request.url.params["fsym"] == "ETH"
    assert request.url.params["tsyms"] == "CAD"


@pytest.mark.asyncio
async def test_conversion_date_is_stamped_after_response():
    before = int(time.time())
    rate = await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"CAD": 2000.42}))
    after = time.time()

    assert isinstance(rate.conversion_date, int)
    assert before <= rate.conversion_date <= after


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("currency", "native_currency"),
    [("cad", "eth"), ("CAD", "ETH"), ("CaD", "eTh")],
)
async def test_currency_codes_are_case_insensitive(currency, native_currency):
    transport = json_transport({"CAD": 2000.42})

    rate = await fetch_exchange_rate(currency, native_currency, transport=transport)

    assert rate.conversion_rate == 2000.42
    assert transport.requests[0].url.params["fsym"] == "ETH"
    assert _tsyms(transport) == ["CAD"]


@pytest.mark.asyncio
async def test_no_usd_rate_when_only_reference_requested():
    rate = await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"CAD": 1000.42}))

    assert rate.usd_conversion_rate is None


@pytest.mark.asyncio
@pytest.mark.parametrize("include_usd_rate", [False, True])
async def test_usd_reference_aliases_usd_rate(include_usd_rate):
    transport = json_transport({"USD": 1000.42})

    rate = await fetch_exchange_rate("usd", "ETH", include_usd_rate, transport=transport)

    assert rate.conversion_rate == 1000.42
    assert rate.usd_conversion_rate == rate.conversion_rate
    assert _tsyms(transport) == ["USD"]


@pytest.mark.asyncio
async def test_combined_request_for_reference_and_usd():
    transport = json_transport({"CAD": 2000.42, "USD": 1000.42})

    rate = await fetch_exchange_rate("CAD", "ETH", True, transport=transport)

    assert rate.conversion_rate == 2000.42
    assert rate.usd_conversion_rate == 1000.42
    assert len(transport.requests) == 1
    assert _tsyms(transport) == ["CAD,USD"]


@pytest.mark.asyncio
async def test_network_error_propagates_unwrapped():
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Example network error", request=request)

    with pytest.raises(httpx.ConnectError, match="Example network error"):
        await fetch_exchange_rate("CAD", "ETH", transport=httpx.MockTransport(fail))


@pytest.mark.asyncio
async def test_unsuccessful_status_raises_fetch_error_with_url():
    expected_url = f"{PRICE_URL}?fsym=ETH&tsyms=CAD"

    with pytest.raises(FetchError) as exc_info:
        await fetch_exchange_rate("cad", "eth", transport=json_transport({}, status_code=500))

    assert str(exc_info.value) == f"Fetch failed with status '500' for request '{expected_url}'"
    assert exc_info.value.status_code == 500
    assert exc_info.value.url == expected_url


def test_build_url_puts_reference_first():
    assert crypto_compare.build_url("ETH", ["CAD", "USD"]) == f"{PRICE_URL}?fsym=ETH&tsyms=CAD,USD"


@pytest.mark.asyncio
async def test_invalid_conversion_rate():
    with pytest.raises(ValidationError, match=re.escape("Invalid response for CAD: invalid")):
        await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"CAD": "invalid"}))


@pytest.mark.asyncio
async def test_invalid_usd_conversion_rate():
    transport = json_transport({"CAD": 2000.47, "USD": "invalid"})

    with pytest.raises(ValidationError) as exc_info:
        await fetch_exchange_rate("CAD", "ETH", True, transport=transport)

    assert str(exc_info.value) == "Invalid response for usdConversionRate: invalid"
    assert exc_info.value.field == "usdConversionRate"
    assert exc_info.value.value == "invalid"


@pytest.mark.asyncio
async def test_missing_conversion_rate():
    with pytest.raises(ValidationError, match=re.escape("Invalid response for CAD: None")):
        await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"USD": 1.0}))


@pytest.mark.asyncio
async def test_non_finite_conversion_rate():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=b'{"CAD": NaN}')
    )

    with pytest.raises(ValidationError, match=re.escape("Invalid response for CAD: nan")):
        await fetch_exchange_rate("CAD", "ETH", transport=transport)


@pytest.mark.asyncio
async def test_boolean_is_not_a_rate():
    with pytest.raises(ValidationError, match=re.escape("Invalid response for CAD: True")):
        await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"CAD": True}))


@pytest.mark.asyncio
async def test_non_object_body_fails_validation():
    with pytest.raises(ValidationError, match=re.escape("Invalid response for CAD: None")):
        await fetch_exchange_rate("CAD", "ETH", transport=json_transport([1, 2]))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "transport"),
    [
        (201, json_transport({"CAD": 1.0}, status_code=201)),
        (204, httpx.MockTransport(lambda request: httpx.Response(204))),
    ],
)
async def test_any_status_other_than_200_raises_fetch_error(status_code, transport):
    expected_url = f"{PRICE_URL}?fsym=ETH&tsyms=CAD"

    with pytest.raises(FetchError) as exc_info:
        await fetch_exchange_rate("CAD", "ETH", transport=transport)

    assert exc_info.value.status_code == status_code
    assert str(exc_info.value) == (
        f"Fetch failed with status '{status_code}' for request '{expected_url}'"
    )


@pytest.mark.asyncio
async def test_negative_conversion_rate():
    with pytest.raises(ValidationError, match=re.escape("Invalid response for CAD: -5.0")):
        await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"CAD": -5.0}))


@pytest.mark.asyncio
async def test_negative_usd_conversion_rate():
    transport = json_transport({"CAD": 2000.47, "USD": -1})

    with pytest.raises(ValidationError) as exc_info:
        await fetch_exchange_rate("CAD", "ETH", True, transport=transport)

    assert str(exc_info.value) == "Invalid response for usdConversionRate: -1"


@pytest.mark.asyncio
async def test_zero_conversion_rate_is_accepted():
    rate = await fetch_exchange_rate("CAD", "ETH", transport=json_transport({"CAD": 0}))

    assert rate.conversion_rate == 0.0


@pytest.mark.asyncio
async def test_body_that_is_not_json_fails_validation():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=b"<html>maintenance</html>")
    )

    with pytest.raises(ValidationError) as exc_info:
        await fetch_exchange_rate("cad", "ETH", transport=transport)

    assert exc_info.value.field == "CAD"
    assert exc_info.value.value == "<html>maintenance</html>"
