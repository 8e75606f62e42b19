"""Editing state for an open handyman profile form."""

from typing import Any

from core.exceptions import InvalidProfileTransitionError
from domain.entities.handyman import (
    HandymanDraft,
    HandymanProfile,
    ProfileMode,
    normalize_record,
    parse_time_of_day,
)

# Fields set_field may replace; availability changes go through toggle_day
# and set_time.
SCALAR_FIELDS = ("name", "experience", "hourly_rate", "skills", "is_available")


class ProfileState:
    """Draft of a profile plus the editing-mode state machine.

    ``NotEditing --begin_editing--> Editing --finish_submit (view)--> NotEditing``.
    Edit and signup modes start in Editing and stay there; there is no
    cancel transition here, a cancelled form simply drops its state.
    """

    def __init__(self) -> None:
        self._mode = ProfileMode.VIEW
        self._draft: HandymanDraft | None = None
        self._is_editing = False

    @property
    def mode(self) -> ProfileMode:
        return self._mode

    @property
    def is_editing(self) -> bool:
        return self._is_editing

    @property
    def has_draft(self) -> bool:
        return self._draft is not None

    @property
    def draft(self) -> HandymanDraft:
        if self._draft is None:
            raise RuntimeError("ProfileState has no draft. Call initialize() first.")
        return self._draft

    def initialize(
        self,
        mode: ProfileMode,
        seed_record: HandymanProfile | HandymanDraft | dict[str, Any] | None = None,
    ) -> HandymanDraft:
        """Set the draft from a seed record, or an empty default."""
        self._mode = ProfileMode(mode)
        self._draft = normalize_record(seed_record) if seed_record is not None else HandymanDraft()
        self._is_editing = self._mode.starts_editing
        return self._draft

    def replace_draft(self, record: HandymanProfile | HandymanDraft | dict[str, Any]) -> HandymanDraft:
        """Swap in a whole new draft, keeping mode, editing flag and record id."""
        draft = normalize_record(record)
        if draft.id is None and self._draft is not None:
            draft.id = self._draft.id
        self._draft = draft
        return self._draft

    def clear(self) -> None:
        """Drop the draft (nothing to show)."""
        self._draft = None

    def set_field(self, name: str, value: Any) -> None:
        """Replace exactly one scalar draft field. No validation here."""
        if name not in SCALAR_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        setattr(self.draft, name, value)

    def toggle_day(self, day: str) -> None:
        days = self.draft.availability.days
        if day in days:
            days.remove(day)
        else:
            days.append(day)

    def set_time(self, which: str, value: Any) -> None:
        """Set the start or end of the availability window."""
        parsed = parse_time_of_day(value)
        if which == "start":
            self.draft.availability.start_time = parsed
        elif which == "end":
            self.draft.availability.end_time = parsed
        else:
            raise ValueError(f"Unknown availability bound: {which}")

    def begin_editing(self) -> None:
        if self._mode is not ProfileMode.VIEW:
            raise InvalidProfileTransitionError(f"Profile is already editable in {self._mode} mode")
        if self._is_editing:
            raise InvalidProfileTransitionError("Profile is already being edited")
        if self._draft is None:
            raise InvalidProfileTransitionError("No profile loaded to edit")
        self._is_editing = True

    def finish_submit(self) -> None:
        """Leave editing after a successful submit (view mode only)."""
        if self._mode is ProfileMode.VIEW:
            self._is_editing = False
