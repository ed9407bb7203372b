"""Thin async HTTP client for price sources."""

import logging
from typing import Any

import httpx

from rate_tracker.exceptions import FetchError

logger = logging.getLogger(__name__)

# JSON can be any of these types
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


async def get(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> JsonValue:
    """GET `url` and return the decoded JSON body.

    `url` must already carry its query string; it is echoed verbatim in
    FetchError so failures can be matched exactly. Any status other than
    200 is a FetchError. Transport errors and undecodable bodies
    (json.JSONDecodeError) are not caught.
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.get(url, headers=headers)
        if response.status_code != 200:
            logger.debug(f"GET {url} returned {response.status_code}")
            raise FetchError(response.status_code, url)
        return response.json()
