"""Current-user lookup protocol."""

from typing import Protocol


class Identity(Protocol):
    """Authenticated user as seen by the domain."""

    id: str
    email: str


class ICurrentUserProvider(Protocol):
    """Resolves the user the current operation acts for."""

    async def current_user(self) -> Identity | None:
        """Return the current user, or None when nobody is signed in."""
        ...
