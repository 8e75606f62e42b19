"""Controller bridging an open profile form to storage."""

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from core.exceptions import (
    AppException,
    AuthenticationError,
    HandymanProfileNotFoundError,
    InvalidProfileTransitionError,
    PersistenceError,
    ProfileValidationError,
)
from domain.entities.handyman import HandymanDraft, HandymanProfile, ProfileMode
from domain.entities.profile_state import ProfileState
from domain.repositories.identity_provider import ICurrentUserProvider
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.profile_payloads import build_update_payload, validate_draft

logger = structlog.get_logger()

SaveHook = Callable[[HandymanDraft], Awaitable[Any]]
CancelHook = Callable[[], None]

UPDATE_SUCCESS_MESSAGE = "Profile updated successfully!"
LOAD_FAILED_MESSAGE = "Error loading your profile"
UPDATE_FAILED_MESSAGE = "Error updating your profile"
INVALID_DRAFT_MESSAGE = "Some profile fields are invalid"


class ProfileController:
    """Orchestrates a ProfileState against the handyman repository.

    One instance per editing session. The host reads ``loading``, ``error``
    and ``success`` after each call; failures never escape except when a
    signup save hook rejects, which is re-raised so the host can react.

    ``loading`` is the only re-entrancy gate: a submit issued while another
    operation is outstanding is rejected without side effects.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        current_user: ICurrentUserProvider,
        mode: ProfileMode = ProfileMode.VIEW,
        seed_record: HandymanProfile | HandymanDraft | dict[str, Any] | None = None,
        on_save: SaveHook | None = None,
        on_cancel: CancelHook | None = None,
        read_only: bool = False,
    ) -> None:
        self._uow_factory = uow_factory
        self._current_user = current_user
        self._on_save = on_save
        self._on_cancel = on_cancel
        self._seeded = seed_record is not None
        self._disposed = False

        self.read_only = read_only
        self.loading = False
        self.error = ""
        self.success = ""
        self.last_error: AppException | None = None
        self.record: HandymanProfile | None = None

        self.state = ProfileState()
        self.state.initialize(ProfileMode(mode), seed_record)
        if self.state.mode is ProfileMode.VIEW and not self._seeded:
            # Nothing to show until load() finds a record.
            self.state.clear()

    @property
    def mode(self) -> ProfileMode:
        return self.state.mode

    @property
    def is_editing(self) -> bool:
        return self.state.is_editing

    @property
    def fields_editable(self) -> bool:
        return self.state.is_editing and not self.read_only

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def load(self) -> HandymanDraft | None:
        """Fetch the current user's profile into the draft (view mode only)."""
        if self.state.mode is not ProfileMode.VIEW or self._seeded:
            return self.state.draft if self.state.has_draft else None

        with self._busy():
            self._reset_messages()
            try:
                record = await self._fetch_own_record()
            except AppException as exc:
                self._fail(exc)
                return None
            except Exception:
                logger.exception("handyman_profile_load_failed")
                self._fail(PersistenceError(LOAD_FAILED_MESSAGE))
                return None

            if self._disposed:
                logger.debug("handyman_profile_load_discarded", profile_id=record.id)
                return None

            self.record = record
            draft = self.state.initialize(ProfileMode.VIEW, record)
            logger.info("handyman_profile_loaded", profile_id=record.id)
            return draft

    async def submit(
        self, payload: HandymanDraft | dict[str, Any] | None = None
    ) -> bool:
        """Validate the draft and save it. Returns True on success."""
        if self.loading:
            logger.warning("handyman_profile_submit_rejected", reason="in_flight")
            return False
        if self._disposed:
            logger.warning("handyman_profile_submit_rejected", reason="disposed")
            return False

        with self._busy():
            self._reset_messages()
            try:
                if not self.fields_editable:
                    raise InvalidProfileTransitionError("Profile is not open for editing")
                if payload is not None:
                    self.state.replace_draft(payload)
                if not self.state.has_draft:
                    raise HandymanProfileNotFoundError()
                draft = self.state.draft
                validate_draft(draft)
            except AppException as exc:
                self._fail(exc)
                return False
            except Exception as exc:
                logger.warning("handyman_profile_draft_malformed", error=str(exc))
                self._fail(ProfileValidationError(INVALID_DRAFT_MESSAGE))
                return False

            if self._on_save is not None:
                return await self._submit_with_hook(self._on_save, draft)
            return await self._submit_update(draft)

    def begin_editing(self) -> None:
        if self.read_only:
            raise InvalidProfileTransitionError("Profile is read-only")
        self.state.begin_editing()

    def cancel(self) -> None:
        """Hand control back to the host and drop this session."""
        if self._on_cancel is not None:
            self._on_cancel()
        self.dispose()

    def dispose(self) -> None:
        """Mark the session discarded; late responses are ignored."""
        self._disposed = True

    async def _submit_with_hook(self, on_save: SaveHook, draft: HandymanDraft) -> bool:
        try:
            await on_save(draft)
        except Exception as exc:
            logger.warning(
                "handyman_profile_save_hook_failed",
                mode=self.state.mode.value,
                error=str(exc),
            )
            if isinstance(exc, AppException):
                self._fail(exc)
            else:
                self._fail(PersistenceError(str(exc) or UPDATE_FAILED_MESSAGE))
            if self.state.mode is ProfileMode.SIGNUP:
                raise
            return False

        self._succeed()
        return True

    async def _submit_update(self, draft: HandymanDraft) -> bool:
        try:
            user = await self._current_user.current_user()
            if user is None:
                raise AuthenticationError("Please log in to update your profile")
            if not draft.id:
                raise HandymanProfileNotFoundError(user.id)

            fields = build_update_payload(draft)
            async with self._uow_factory() as uow:
                updated = await uow.handymen.update_partial(draft.id, fields)
                if not updated:
                    raise PersistenceError(UPDATE_FAILED_MESSAGE)
                await uow.commit()
        except AppException as exc:
            logger.warning(
                "handyman_profile_update_failed",
                profile_id=draft.id,
                error_code=exc.error_code.value,
            )
            self._fail(exc)
            return False
        except Exception:
            logger.exception("handyman_profile_update_failed", profile_id=draft.id)
            self._fail(PersistenceError(UPDATE_FAILED_MESSAGE))
            return False

        logger.info("handyman_profile_updated", profile_id=draft.id)
        self._succeed()
        return True

    async def _fetch_own_record(self) -> HandymanProfile:
        user = await self._current_user.current_user()
        if user is None:
            raise AuthenticationError("Please log in to view your profile")

        async with self._uow_factory() as uow:
            records = await uow.handymen.find_by_user_id(user.id)

        if not records:
            raise HandymanProfileNotFoundError(user.id)
        if len(records) > 1:
            # Known data-integrity gap: first match wins.
            logger.warning(
                "handyman_profile_duplicates",
                user_id=user.id,
                count=len(records),
                used_profile_id=records[0].id,
            )
        return records[0]

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self.loading = True
        try:
            yield
        finally:
            self.loading = False

    def _reset_messages(self) -> None:
        if self._disposed:
            return
        self.error = ""
        self.success = ""
        self.last_error = None

    def _fail(self, exc: AppException) -> None:
        if self._disposed:
            return
        self.error = exc.message
        self.success = ""
        self.last_error = exc

    def _succeed(self) -> None:
        if self._disposed:
            return
        self.success = UPDATE_SUCCESS_MESSAGE
        self.state.finish_submit()
