"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from core.config import settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def _new_id() -> str:
    return str(uuid4())


class HandymanModel(Base):
    """Handyman profile document.

    ``user_id`` is indexed but not unique: legacy data may hold more than
    one profile per user, and reads take the oldest.
    """

    __tablename__ = settings.handymen_collection
    __table_args__ = (
        CheckConstraint("experience >= 0", name="ck_handymen_experience_non_negative"),
        CheckConstraint("hourly_rate >= 0", name="ck_handymen_hourly_rate_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hourly_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    skills: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    availability: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
