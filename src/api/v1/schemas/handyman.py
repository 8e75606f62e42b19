"""Pydantic schemas for Handyman API.

Field names are snake_case in Python and camelCase on the wire
(``hourlyRate``, ``isAvailable``, ``startTime``); both spellings are
accepted on input.
"""

from datetime import datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.exceptions import ProfileValidationError
from domain.entities.handyman import Skill, Weekday, parse_time_of_day


class CamelModel(BaseModel):
    """Base model emitting and accepting camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AvailabilitySchema(CamelModel):
    """Weekly availability window."""

    days: list[Weekday] = Field(default_factory=list)
    start_time: time | None = None
    end_time: time | None = None

    @field_validator("days")
    @classmethod
    def dedupe_days(cls, v: list[Weekday]) -> list[Weekday]:
        return list(dict.fromkeys(v))

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time(cls, v: Any) -> time | None:
        # Time pickers send full ISO datetimes; only the time part matters.
        try:
            return parse_time_of_day(v)
        except ProfileValidationError as exc:
            raise ValueError(exc.message) from exc


class HandymanCreate(CamelModel):
    """Schema for signing up as a handyman.

    Required fields are checked by the profile controller so the caller
    gets the same message a form would show.
    """

    name: str = ""
    experience: int | float | str | None = None
    hourly_rate: int | float | str | None = None
    skills: list[Skill] = Field(default_factory=list)
    is_available: bool | None = None
    availability: AvailabilitySchema | None = None

    @field_validator("skills")
    @classmethod
    def dedupe_skills(cls, v: list[Skill]) -> list[Skill]:
        return list(dict.fromkeys(v))


class HandymanUpdate(CamelModel):
    """Schema for editing a profile (all fields optional)."""

    name: str | None = None
    experience: int | float | str | None = None
    hourly_rate: int | float | str | None = None
    skills: list[Skill] | None = None
    is_available: bool | None = None
    availability: AvailabilitySchema | None = None


class HandymanResponse(CamelModel):
    """Schema for Handyman profile response."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "9b2f6c1e-2a57-4b55-9a2e-6f0d8f1f0a11",
                "userId": "u1",
                "email": "jo@example.com",
                "name": "Jo",
                "experience": 3,
                "hourlyRate": 25.0,
                "skills": ["Plumbing"],
                "isAvailable": True,
                "availability": {
                    "days": ["Monday"],
                    "startTime": "09:00:00",
                    "endTime": "17:00:00",
                },
                "rating": 0,
                "reviews": 0,
                "createdAt": "2026-01-28T10:00:00",
            }
        },
    )

    id: str
    user_id: str
    email: str
    name: str
    experience: int
    hourly_rate: float
    skills: list[str]
    is_available: bool
    availability: AvailabilitySchema
    rating: float
    reviews: int
    created_at: datetime


class HandymanDetailResponse(BaseModel):
    """Schema for single Handyman profile."""

    data: HandymanResponse


class HandymanOptionsResponse(BaseModel):
    """Vocabularies a profile form offers."""

    skills: list[str]
    days: list[str]
