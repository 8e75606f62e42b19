"""Handyman profile domain entities."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, time
from enum import StrEnum
from typing import Any

from core.exceptions import ProfileValidationError


class Skill(StrEnum):
    """Closed vocabulary of handyman specialties."""

    PLUMBING = "Plumbing"
    ELECTRICAL = "Electrical"
    CARPENTRY = "Carpentry"
    PAINTING = "Painting"
    CLEANING = "Cleaning"
    GARDENING = "Gardening"
    HVAC = "HVAC"
    APPLIANCE_REPAIR = "Appliance Repair"
    MASONRY = "Masonry"
    ROOFING = "Roofing"


class Weekday(StrEnum):
    """Weekday labels, in calendar order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class ProfileMode(StrEnum):
    """Mode a profile form is opened in.

    VIEW starts read-only and may enter editing; EDIT and SIGNUP are
    editing for their whole lifetime.
    """

    VIEW = "view"
    EDIT = "edit"
    SIGNUP = "signup"

    @property
    def starts_editing(self) -> bool:
        return self is not ProfileMode.VIEW


# The only fields an edit may touch.
EDITABLE_FIELDS = (
    "name",
    "experience",
    "hourly_rate",
    "skills",
    "is_available",
    "availability",
)

# Fields a persisted record owns that a draft never carries.
SERVER_FIELDS = ("user_id", "email", "rating", "reviews", "created_at")


@dataclass
class Availability:
    """Weekly availability window."""

    days: list[str] = field(default_factory=list)
    start_time: time | None = None
    end_time: time | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": list(self.days),
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


@dataclass
class HandymanDraft:
    """Mutable working copy of a profile while a form is open.

    ``experience`` and ``hourly_rate`` keep raw form input (text or number)
    until submit coerces them.
    """

    name: str = ""
    experience: Any = ""
    hourly_rate: Any = ""
    skills: list[str] = field(default_factory=list)
    is_available: bool = True
    availability: Availability = field(default_factory=Availability)
    id: str | None = None


@dataclass
class HandymanProfile:
    """Domain entity for a persisted handyman profile."""

    user_id: str
    email: str
    name: str
    experience: int = 0
    hourly_rate: float = 0.0
    skills: list[str] = field(default_factory=list)
    is_available: bool = True
    availability: Availability = field(default_factory=Availability)
    rating: float = 0
    reviews: int = 0
    id: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_draft(self) -> HandymanDraft:
        """Copy the editable part of the record into a fresh draft."""
        return HandymanDraft(
            id=self.id,
            name=self.name,
            experience=self.experience,
            hourly_rate=self.hourly_rate,
            skills=list(self.skills or []),
            is_available=self.is_available,
            availability=normalize_availability(self.availability),
        )


def parse_time_of_day(value: Any) -> time | None:
    """Parse a time-of-day from an ISO string, ``time`` or ``datetime``.

    Full ISO datetimes (as produced by browser time pickers) keep only
    their time part. Empty values map to None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.time().replace(tzinfo=None)
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text:
                return datetime.fromisoformat(text).time().replace(tzinfo=None)
            return time.fromisoformat(text)
        except ValueError as exc:
            raise ProfileValidationError(f"Invalid time of day: {value!r}") from exc
    raise ProfileValidationError(f"Invalid time of day: {value!r}")


def _unique(values: Iterable[Any]) -> list[str]:
    seen: list[str] = []
    for value in values:
        label = str(value)
        if label not in seen:
            seen.append(label)
    return seen


def normalize_availability(raw: Any) -> Availability:
    """Default-fill an availability sub-record, each piece independently."""
    if isinstance(raw, Availability):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        return Availability()
    days = raw.get("days") or []
    start = raw.get("start_time", raw.get("startTime"))
    end = raw.get("end_time", raw.get("endTime"))
    return Availability(
        days=_unique(days),
        start_time=parse_time_of_day(start),
        end_time=parse_time_of_day(end),
    )


def normalize_record(raw: Mapping[str, Any] | HandymanProfile | HandymanDraft) -> HandymanDraft:
    """Turn a record entering the system into a well-typed draft.

    Applied wherever an external record is read in: load, seeding and the
    signup merge. Accepts snake_case or camelCase keys so legacy documents
    normalize the same way.
    """
    if isinstance(raw, HandymanProfile):
        return raw.to_draft()
    if isinstance(raw, HandymanDraft):
        raw = {
            "id": raw.id,
            "name": raw.name,
            "experience": raw.experience,
            "hourly_rate": raw.hourly_rate,
            "skills": raw.skills,
            "is_available": raw.is_available,
            "availability": raw.availability,
        }

    def pick(snake: str, camel: str, default: Any) -> Any:
        if snake in raw:
            return raw[snake]
        return raw.get(camel, default)

    is_available = pick("is_available", "isAvailable", None)
    experience = raw.get("experience", "")
    hourly_rate = pick("hourly_rate", "hourlyRate", "")
    return HandymanDraft(
        id=raw.get("id"),
        name=raw.get("name") or "",
        experience="" if experience is None else experience,
        hourly_rate="" if hourly_rate is None else hourly_rate,
        skills=_unique(raw.get("skills") or []),
        is_available=True if is_available is None else bool(is_available),
        availability=normalize_availability(raw.get("availability")),
    )
