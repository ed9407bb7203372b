"""Infrastructure layer providing reusable components.

- HTTP client used by price sources
"""

from rate_tracker.infrastructure.http_client import get

__all__ = ["get"]
