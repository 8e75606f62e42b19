"""Handyman profile service used by the HTTP layer."""

from collections.abc import Callable
from typing import Any, NoReturn

from core.exceptions import AuthenticationError, PersistenceError
from domain.entities.handyman import HandymanProfile, ProfileMode, Skill, Weekday
from domain.entities.profile_state import ProfileState
from domain.repositories.identity_provider import ICurrentUserProvider
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.profile_controller import ProfileController
from domain.services.signup_service import HandymanSignupService

# Stored as NOT NULL; an explicit null in a change set means "leave as is".
_NON_NULLABLE_FIELDS = frozenset({"skills", "is_available"})


def _raise_failure(controller: ProfileController) -> NoReturn:
    raise controller.last_error or PersistenceError(controller.error or "Error updating your profile")


class HandymanService:
    """Runs one profile form per call, the way a page would host it."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_profile(self, current_user: ICurrentUserProvider) -> HandymanProfile:
        """Load the current user's profile in view mode."""
        controller = ProfileController(self._uow_factory, current_user, mode=ProfileMode.VIEW)
        await controller.load()
        if controller.record is None:
            _raise_failure(controller)
        return controller.record

    async def update_profile(
        self, current_user: ICurrentUserProvider, changes: dict[str, Any]
    ) -> HandymanProfile:
        """Apply a partial change set to the current user's profile."""
        existing = await self.get_profile(current_user)

        controller = ProfileController(
            self._uow_factory,
            current_user,
            mode=ProfileMode.EDIT,
            seed_record=existing,
        )
        apply_changes(controller.state, changes)

        if not await controller.submit():
            _raise_failure(controller)
        return await self.get_profile(current_user)

    async def signup(
        self, current_user: ICurrentUserProvider, fields: dict[str, Any]
    ) -> HandymanProfile:
        """Create the current user's profile.

        A user who already has one gets ``HandymanProfileExistsError``; the
        check runs in the same transaction as the insert.
        """
        if await current_user.current_user() is None:
            raise AuthenticationError("Please log in to sign up as a handyman")

        signup = HandymanSignupService(self._uow_factory, current_user)
        controller = signup.controller(seed_record=fields)
        await controller.submit()
        if signup.created is None:
            _raise_failure(controller)
        return signup.created

    @staticmethod
    def options() -> dict[str, list[str]]:
        return {
            "skills": [s.value for s in Skill],
            "days": [d.value for d in Weekday],
        }


def apply_changes(state: ProfileState, changes: dict[str, Any]) -> None:
    """Replay a change set through the draft's edit operations."""
    for name in ("name", "experience", "hourly_rate", "skills", "is_available"):
        if name not in changes:
            continue
        if changes[name] is None and name in _NON_NULLABLE_FIELDS:
            continue
        state.set_field(name, changes[name])

    availability = changes.get("availability")
    if availability is None:
        return
    if "days" in availability and availability["days"] is not None:
        wanted = [str(d) for d in availability["days"]]
        for day in list(state.draft.availability.days):
            if day not in wanted:
                state.toggle_day(day)
        for day in wanted:
            if day not in state.draft.availability.days:
                state.toggle_day(day)
    if "start_time" in availability:
        state.set_time("start", availability["start_time"])
    if "end_time" in availability:
        state.set_time("end", availability["end_time"])
