"""Errors raised while fetching and validating exchange rates."""

import httpx

# Network-level failures are httpx's own and propagate unwrapped.
TransportError = httpx.TransportError


class RateTrackerError(Exception):
    """Base class for rate tracker errors."""


class FetchError(RateTrackerError):
    """Price source answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Fetch failed with status '{status_code}' for request '{url}'")


class ValidationError(RateTrackerError):
    """A requested field in the price source response is missing or not a finite number."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid response for {field}: {value}")
