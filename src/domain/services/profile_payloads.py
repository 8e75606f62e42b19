"""Validation and storage payload shaping for handyman profiles."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from core.exceptions import ProfileValidationError
from domain.entities.handyman import (
    HandymanDraft,
    HandymanProfile,
    Skill,
    Weekday,
    normalize_record,
)
from domain.repositories.identity_provider import Identity

REQUIRED_FIELDS = ("name", "experience", "hourly_rate")

_SKILLS = frozenset(s.value for s in Skill)
_WEEKDAYS = frozenset(d.value for d in Weekday)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_required(draft: HandymanDraft) -> None:
    """Raise if name, experience or hourly rate is missing."""
    missing = [name for name in REQUIRED_FIELDS if _is_empty(getattr(draft, name))]
    if missing:
        raise ProfileValidationError(fields=missing)


def validate_vocabulary(draft: HandymanDraft) -> None:
    """Skills and weekday labels must come from their fixed vocabularies."""
    if not isinstance(draft.skills, list):
        raise ProfileValidationError("skills must be a list", fields=["skills"])
    unknown_skills = [s for s in draft.skills if s not in _SKILLS]
    if unknown_skills:
        raise ProfileValidationError(
            f"Unknown skills: {', '.join(unknown_skills)}", fields=["skills"]
        )
    unknown_days = [d for d in draft.availability.days if d not in _WEEKDAYS]
    if unknown_days:
        raise ProfileValidationError(
            f"Unknown days: {', '.join(unknown_days)}", fields=["availability"]
        )


def _to_decimal(value: Any, label: str) -> Decimal:
    if isinstance(value, bool):
        raise ProfileValidationError(f"{label} must be a number", fields=[label])
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ProfileValidationError(f"{label} must be a number", fields=[label]) from exc
    if not number.is_finite():
        raise ProfileValidationError(f"{label} must be a number", fields=[label])
    if number < 0:
        raise ProfileValidationError(f"{label} cannot be negative", fields=[label])
    return number


def coerce_experience(value: Any) -> int:
    """Years of experience as a non-negative whole number."""
    number = _to_decimal(value, "experience")
    if number != number.to_integral_value():
        raise ProfileValidationError("experience must be a whole number of years", fields=["experience"])
    return int(number)


def coerce_hourly_rate(value: Any) -> float:
    return float(_to_decimal(value, "hourly_rate"))


def validate_draft(draft: HandymanDraft) -> None:
    """Everything a draft must satisfy before it is sent to storage."""
    validate_required(draft)
    validate_vocabulary(draft)
    if not isinstance(draft.is_available, bool):
        raise ProfileValidationError("is_available must be true or false", fields=["is_available"])
    coerce_experience(draft.experience)
    coerce_hourly_rate(draft.hourly_rate)


def build_update_payload(draft: HandymanDraft) -> dict[str, Any]:
    """Partial update holding exactly the six editable fields."""
    return {
        "name": draft.name,
        "experience": coerce_experience(draft.experience),
        "hourly_rate": coerce_hourly_rate(draft.hourly_rate),
        "skills": [str(s) for s in dict.fromkeys(draft.skills)],
        "is_available": draft.is_available,
        "availability": {
            "days": [str(d) for d in dict.fromkeys(draft.availability.days)],
            "start_time": draft.availability.start_time,
            "end_time": draft.availability.end_time,
        },
    }


def build_signup_record(
    draft: HandymanDraft | dict[str, Any],
    user: Identity,
    now: datetime | None = None,
) -> HandymanProfile:
    """Merge a signup draft with the current identity and creation defaults."""
    merged = normalize_record(draft)
    validate_draft(merged)
    return HandymanProfile(
        user_id=user.id,
        email=user.email,
        name=merged.name,
        experience=coerce_experience(merged.experience),
        hourly_rate=coerce_hourly_rate(merged.hourly_rate),
        skills=list(merged.skills),
        # Falsy counts as unset at signup.
        is_available=merged.is_available or True,
        availability=merged.availability,
        rating=0,
        reviews=0,
        created_at=now or datetime.utcnow(),
    )
