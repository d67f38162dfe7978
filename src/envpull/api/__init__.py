"""Remote API access."""

from envpull.api.client import ApiClient, ApiError

__all__ = [
    "ApiClient",
    "ApiError",
]
