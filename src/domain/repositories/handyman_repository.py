"""Handyman profile repository protocol."""

from typing import Any, Protocol

from domain.entities.handyman import HandymanProfile


class IHandymanRepository(Protocol):
    """Repository interface for handyman profile records."""

    async def find_by_user_id(self, user_id: str) -> list[HandymanProfile]:
        """Get every profile bound to a user, oldest first.

        At most one is expected; callers decide what to do with extras.
        """
        ...

    async def lock_user(self, user_id: str) -> None:
        """Serialize profile writers for one user until the transaction ends."""
        ...

    async def insert(self, profile: HandymanProfile) -> str:
        """Insert a new profile and return its generated ID."""
        ...

    async def update_partial(self, id: str, fields: dict[str, Any]) -> bool:
        """Apply a subset of editable fields. False if no such record."""
        ...
