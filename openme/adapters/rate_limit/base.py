"""Rate limiter interfaces.

Routes depend on this abstraction (not the concrete implementation) so the
per-process store can later be replaced by a shared one (e.g., Redis).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit hit.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for scope-aware rate limiters."""

    @abstractmethod
    def hit(
        self,
        scope: str,
        client_key: str,
        *,
        limit: int,
        window_seconds: float,
    ) -> RateLimitResult:
        """Record one request for ``(scope, client_key)``.

        Args:
            scope: Namespace of the quota (usually the endpoint name).
            client_key: Best-effort caller identifier.
            limit: Max requests allowed in one window for this scope.
            window_seconds: Window length for this scope.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop every bucket."""
        raise NotImplementedError
