from dataclasses import dataclass
from typing import Dict, Mapping, Optional

RATE_LIMIT_HEADERS = (
    "X-RateLimit-Limit",
    "X-RateLimit-Remaining",
    "X-RateLimit-Reset",
    "X-RateLimit-Used",
)


@dataclass(frozen=True)
class RateLimitInfo:
    """GitHub quota metadata read from an upstream response."""

    limit: Optional[str] = None
    remaining: Optional[str] = None
    reset: Optional[str] = None
    used: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitInfo":
        # requests exposes a case-insensitive mapping; plain dicts are lowered first.
        if not hasattr(headers, "lower_items"):
            headers = {k.lower(): v for k, v in headers.items()}
        return cls(
            limit=headers.get("x-ratelimit-limit"),
            remaining=headers.get("x-ratelimit-remaining"),
            reset=headers.get("x-ratelimit-reset"),
            used=headers.get("x-ratelimit-used"),
        )

    def as_headers(self) -> Dict[str, str]:
        """Response headers for the values that were present upstream."""
        values = (self.limit, self.remaining, self.reset, self.used)
        return {
            name: value
            for name, value in zip(RATE_LIMIT_HEADERS, values)
            if value is not None
        }
