"""SetStore protocol: set ownership checks."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SetStore(Protocol):
    async def verify_ownership(self, set_id: str, user_id: str) -> bool:
        """Return True if *set_id* exists and belongs to *user_id*."""
        ...
