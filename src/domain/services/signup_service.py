"""Signup flow for new handyman profiles."""

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

import structlog

from core.exceptions import (
    AppException,
    AuthenticationError,
    HandymanProfileExistsError,
    PersistenceError,
)
from domain.entities.handyman import HandymanDraft, HandymanProfile, ProfileMode
from domain.repositories.identity_provider import ICurrentUserProvider
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.profile_controller import ProfileController
from domain.services.profile_payloads import build_signup_record

logger = structlog.get_logger()

SIGNUP_FAILED_MESSAGE = "Error creating your profile. Please try again."

CreatedHook = Callable[[HandymanProfile], Awaitable[None] | None]


class HandymanSignupService:
    """Host side of the signup form: owns the save hook.

    ``save`` synthesizes the creation defaults, refuses a second profile for
    the same user, inserts the record and then notifies ``on_created``
    (where a UI would navigate to the profile page).
    Failures are recorded in ``error`` and re-raised.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        current_user: ICurrentUserProvider,
        on_created: CreatedHook | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._current_user = current_user
        self._on_created = on_created
        self._clock = clock
        self.error = ""
        self.created: HandymanProfile | None = None

    def controller(
        self, seed_record: HandymanDraft | dict[str, Any] | None = None
    ) -> ProfileController:
        """A signup-mode form wired to this service's save hook."""
        return ProfileController(
            self._uow_factory,
            self._current_user,
            mode=ProfileMode.SIGNUP,
            seed_record=seed_record if seed_record is not None else HandymanDraft(),
            on_save=self.save,
        )

    async def save(self, draft: HandymanDraft) -> HandymanProfile:
        try:
            user = await self._current_user.current_user()
            if user is None:
                raise AuthenticationError("Please log in to sign up as a handyman")

            record = build_signup_record(draft, user, now=self._clock())

            async with self._uow_factory() as uow:
                # Held until commit, so a concurrent signup sees this insert.
                await uow.handymen.lock_user(user.id)
                if await uow.handymen.find_by_user_id(user.id):
                    raise HandymanProfileExistsError(user.id)
                record.id = await uow.handymen.insert(record)
                await uow.commit()
        except AppException as exc:
            logger.warning("handyman_signup_failed", error_code=exc.error_code.value)
            self.error = exc.message or SIGNUP_FAILED_MESSAGE
            raise
        except Exception as exc:
            logger.exception("handyman_signup_failed")
            self.error = SIGNUP_FAILED_MESSAGE
            raise PersistenceError(SIGNUP_FAILED_MESSAGE) from exc

        logger.info("handyman_signup_completed", profile_id=record.id, user_id=record.user_id)
        self.error = ""
        self.created = record
        if self._on_created is not None:
            result = self._on_created(record)
            if result is not None:
                await result
        return record
