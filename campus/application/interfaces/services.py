"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import Any, Protocol


# Cache service interface
class ICacheService(Protocol):
    """Protocol for the permission cache (e.g. Redis). Failures must not raise."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""

    async def get(self, key: str) -> Any | None:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Remove key from cache."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern; returns number deleted."""
