"""Unit tests for HandymanService."""

import asyncio
from datetime import time
from typing import Any

import pytest

from core.exceptions import (
    AuthenticationError,
    HandymanProfileExistsError,
    HandymanProfileNotFoundError,
    PersistenceError,
    ProfileValidationError,
)
from domain.entities.handyman import HandymanProfile, ProfileMode
from domain.entities.profile_state import ProfileState
from domain.services.handyman_service import HandymanService, apply_changes
from infrastructure.auth.provider import StaticCurrentUser

from tests.unit.conftest import FakeUnitOfWork


class _LockingUnitOfWork(FakeUnitOfWork):
    """Unit of work over a shared row list, serialized by lock_user."""

    def __init__(self, rows: list[HandymanProfile], lock: asyncio.Lock) -> None:
        super().__init__()
        self._rows = rows
        self._lock = lock
        self._locked = False
        self._pending: list[HandymanProfile] = []
        self.handymen.lock_user.side_effect = self._lock_user
        self.handymen.find_by_user_id.side_effect = self._find
        self.handymen.insert.side_effect = self._insert

    async def _lock_user(self, user_id: str) -> None:
        await self._lock.acquire()
        self._locked = True

    async def _find(self, user_id: str) -> list[HandymanProfile]:
        await asyncio.sleep(0)
        return [r for r in self._rows if r.user_id == user_id]

    async def _insert(self, record: HandymanProfile) -> str:
        self._pending.append(record)
        return f"hm-{len(self._rows) + len(self._pending)}"

    async def commit(self) -> None:
        self._rows.extend(self._pending)
        self._pending = []
        self.committed = True

    async def __aexit__(self, *args: Any) -> None:
        if self._locked:
            self._locked = False
            self._lock.release()


@pytest.fixture
def service(uow: FakeUnitOfWork) -> HandymanService:
    return HandymanService(lambda: uow)  # type: ignore[arg-type]


class TestGetProfile:
    async def test_returns_stored_record(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
        stored_profile: HandymanProfile,
    ) -> None:
        uow.handymen.find_by_user_id.return_value = [stored_profile]

        profile = await service.get_profile(current_user)

        assert profile is stored_profile

    async def test_not_found(
        self, service: HandymanService, current_user: StaticCurrentUser
    ) -> None:
        with pytest.raises(HandymanProfileNotFoundError):
            await service.get_profile(current_user)

    async def test_requires_login(
        self, service: HandymanService, anonymous: StaticCurrentUser
    ) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            await service.get_profile(anonymous)

        assert exc_info.value.message == "Please log in to view your profile"


class TestUpdateProfile:
    async def test_partial_change_sends_full_editable_set(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
        stored_profile: HandymanProfile,
    ) -> None:
        uow.handymen.find_by_user_id.return_value = [stored_profile]

        await service.update_profile(current_user, {"hourly_rate": 30})

        profile_id, fields = uow.handymen.update_partial.call_args.args
        assert profile_id == "hm-1"
        assert fields == {
            "name": "Jo",
            "experience": 3,
            "hourly_rate": 30.0,
            "skills": ["Plumbing"],
            "is_available": True,
            "availability": {"days": ["Monday"], "start_time": None, "end_time": None},
        }

    async def test_null_for_non_nullable_fields_keeps_stored_values(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
        stored_profile: HandymanProfile,
    ) -> None:
        uow.handymen.find_by_user_id.return_value = [stored_profile]

        await service.update_profile(current_user, {"skills": None, "is_available": None})

        _, fields = uow.handymen.update_partial.call_args.args
        assert fields["skills"] == ["Plumbing"]
        assert fields["is_available"] is True

    async def test_blank_name_is_rejected(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
        stored_profile: HandymanProfile,
    ) -> None:
        uow.handymen.find_by_user_id.return_value = [stored_profile]

        with pytest.raises(ProfileValidationError) as exc_info:
            await service.update_profile(current_user, {"name": "  "})

        assert exc_info.value.details == {"fields": ["name"]}
        uow.handymen.update_partial.assert_not_called()

    async def test_storage_rejection(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
        stored_profile: HandymanProfile,
    ) -> None:
        uow.handymen.find_by_user_id.return_value = [stored_profile]
        uow.handymen.update_partial.return_value = False

        with pytest.raises(PersistenceError):
            await service.update_profile(current_user, {"name": "Joanna"})


class TestSignup:
    async def test_creates_profile(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
    ) -> None:
        profile = await service.signup(
            current_user, {"name": "Jo", "experience": "3", "hourly_rate": "25"}
        )

        assert profile.id == "new-profile-id"
        assert profile.user_id == "u1"
        assert profile.rating == 0
        uow.handymen.insert.assert_called_once()

    async def test_refuses_second_profile(
        self,
        uow: FakeUnitOfWork,
        service: HandymanService,
        current_user: StaticCurrentUser,
        stored_profile: HandymanProfile,
    ) -> None:
        uow.handymen.find_by_user_id.return_value = [stored_profile]

        with pytest.raises(HandymanProfileExistsError):
            await service.signup(current_user, {"name": "Jo", "experience": 3, "hourly_rate": 25})

        uow.handymen.insert.assert_not_called()

    async def test_concurrent_signups_create_one_profile(
        self, current_user: StaticCurrentUser
    ) -> None:
        rows: list[HandymanProfile] = []
        lock = asyncio.Lock()
        service = HandymanService(lambda: _LockingUnitOfWork(rows, lock))  # type: ignore[arg-type]
        fields = {"name": "Jo", "experience": 3, "hourly_rate": 25}

        results = await asyncio.gather(
            service.signup(current_user, fields),
            service.signup(current_user, dict(fields)),
            return_exceptions=True,
        )

        assert len(rows) == 1
        assert sum(isinstance(r, HandymanProfile) for r in results) == 1
        assert sum(isinstance(r, HandymanProfileExistsError) for r in results) == 1

    async def test_missing_fields(
        self, service: HandymanService, current_user: StaticCurrentUser
    ) -> None:
        with pytest.raises(ProfileValidationError) as exc_info:
            await service.signup(current_user, {"name": "Jo"})

        assert exc_info.value.message == "Please fill in all required fields"

    async def test_requires_login(
        self, uow: FakeUnitOfWork, service: HandymanService, anonymous: StaticCurrentUser
    ) -> None:
        with pytest.raises(AuthenticationError):
            await service.signup(anonymous, {"name": "Jo", "experience": 3, "hourly_rate": 25})

        uow.handymen.find_by_user_id.assert_not_called()


class TestApplyChanges:
    def _state(self, stored_profile: HandymanProfile) -> ProfileState:
        state = ProfileState()
        state.initialize(ProfileMode.EDIT, stored_profile)
        return state

    def test_replaces_days_in_given_order(self, stored_profile: HandymanProfile) -> None:
        state = self._state(stored_profile)

        apply_changes(state, {"availability": {"days": ["Friday", "Tuesday"]}})

        assert state.draft.availability.days == ["Friday", "Tuesday"]

    def test_sets_times(self, stored_profile: HandymanProfile) -> None:
        state = self._state(stored_profile)

        apply_changes(
            state,
            {"availability": {"start_time": "2024-01-01T09:00:00Z", "end_time": time(17, 0)}},
        )

        assert state.draft.availability.start_time == time(9, 0)
        assert state.draft.availability.end_time == time(17, 0)
        assert state.draft.availability.days == ["Monday"]

    def test_leaves_untouched_fields(self, stored_profile: HandymanProfile) -> None:
        state = self._state(stored_profile)

        apply_changes(state, {"is_available": False})

        assert state.draft.is_available is False
        assert state.draft.name == "Jo"
        assert state.draft.skills == ["Plumbing"]

    def test_null_skips_non_nullable_fields(self, stored_profile: HandymanProfile) -> None:
        state = self._state(stored_profile)

        apply_changes(state, {"skills": None, "is_available": None, "name": "Joanna"})

        assert state.draft.skills == ["Plumbing"]
        assert state.draft.is_available is True
        assert state.draft.name == "Joanna"


def test_options_lists_vocabularies() -> None:
    options = HandymanService.options()

    assert options["days"][0] == "Monday"
    assert len(options["days"]) == 7
    assert "Plumbing" in options["skills"]
