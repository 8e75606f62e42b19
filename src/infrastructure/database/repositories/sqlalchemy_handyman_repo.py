"""SQLAlchemy implementation of Handyman repository."""

from datetime import time
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.handyman import (
    EDITABLE_FIELDS,
    Availability,
    HandymanProfile,
    normalize_availability,
)
from infrastructure.database.models import HandymanModel


def _time_to_json(value: time | None) -> str | None:
    return value.isoformat() if value is not None else None


def _availability_to_json(availability: Availability | dict[str, Any]) -> dict[str, Any]:
    normalized = normalize_availability(availability)
    return {
        "days": list(normalized.days),
        "start_time": _time_to_json(normalized.start_time),
        "end_time": _time_to_json(normalized.end_time),
    }


class SQLAlchemyHandymanRepository:
    """SQLAlchemy implementation of IHandymanRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_user_id(self, user_id: str) -> list[HandymanProfile]:
        """Get all profiles bound to a user, oldest first."""
        stmt = (
            select(HandymanModel)
            .where(HandymanModel.user_id == user_id)
            .order_by(HandymanModel.created_at, HandymanModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def lock_user(self, user_id: str) -> None:
        """Take a transaction-scoped advisory lock keyed by the user.

        PostgreSQL only; other dialects run single-writer in tests.
        """
        if self._session.get_bind().dialect.name != "postgresql":
            return
        await self._session.execute(select(func.pg_advisory_xact_lock(func.hashtext(user_id))))

    async def insert(self, profile: HandymanProfile) -> str:
        """Insert a profile and return its generated ID."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        return model.id

    async def update_partial(self, id: str, fields: dict[str, Any]) -> bool:
        """Apply a subset of the editable fields to one profile."""
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        model = await self._get_model(id)
        if not model:
            return False

        for name, value in fields.items():
            if name == "availability":
                value = _availability_to_json(value)
            elif name == "skills":
                value = [str(skill) for skill in value]
            setattr(model, name, value)

        await self._session.flush()
        return True

    async def _get_model(self, id: str) -> HandymanModel | None:
        stmt = select(HandymanModel).where(HandymanModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: HandymanModel) -> HandymanProfile:
        """Convert ORM model to domain entity."""
        return HandymanProfile(
            id=model.id,
            user_id=model.user_id,
            email=model.email,
            name=model.name,
            experience=model.experience,
            hourly_rate=model.hourly_rate,
            skills=list(model.skills or []),
            is_available=model.is_available,
            availability=normalize_availability(model.availability),
            rating=model.rating,
            reviews=model.reviews,
            created_at=model.created_at,
        )

    def _to_model(self, entity: HandymanProfile) -> HandymanModel:
        """Convert domain entity to ORM model."""
        model = HandymanModel(
            user_id=entity.user_id,
            email=entity.email,
            name=entity.name,
            experience=entity.experience,
            hourly_rate=entity.hourly_rate,
            skills=[str(skill) for skill in entity.skills],
            is_available=entity.is_available,
            availability=_availability_to_json(entity.availability),
            rating=entity.rating,
            reviews=entity.reviews,
            created_at=entity.created_at,
        )
        if entity.id:
            model.id = entity.id
        return model
