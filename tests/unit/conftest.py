"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.handyman import Availability, HandymanProfile
from infrastructure.auth.provider import StaticCurrentUser, TokenUser


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked handyman repository."""

    def __init__(self) -> None:
        self.handymen = AsyncMock()
        self.handymen.find_by_user_id.return_value = []
        self.handymen.update_partial.return_value = True
        self.handymen.insert.return_value = "new-profile-id"
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user() -> TokenUser:
    return TokenUser(id="u1", email="jo@x.com", display_name="Jo")


@pytest.fixture
def current_user(user: TokenUser) -> StaticCurrentUser:
    """Signed-in user lookup."""
    return StaticCurrentUser(user)


@pytest.fixture
def anonymous() -> StaticCurrentUser:
    """Lookup with nobody signed in."""
    return StaticCurrentUser(None)


@pytest.fixture
def stored_profile(user: TokenUser) -> HandymanProfile:
    return HandymanProfile(
        id="hm-1",
        user_id=user.id,
        email=user.email,
        name="Jo",
        experience=3,
        hourly_rate=25.0,
        skills=["Plumbing"],
        availability=Availability(days=["Monday"]),
    )
