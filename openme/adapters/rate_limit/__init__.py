"""Rate limiting adapters.

The API starts with an in-memory limiter; a shared store can replace it
later without changing the routes.
"""

from openme.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from openme.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
