# core/sa/models/base.py
import uuid
from datetime import datetime, UTC
from sqlalchemy.orm import DeclarativeBase, mapped_column, Mapped
from sqlalchemy import DateTime


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the database hands back"""
    return datetime.now(UTC).replace(tzinfo=None)


def as_utc_naive(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC so it compares with stored values"""
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models"""
    pass

class CreatedAtMixin:
    """Mixin to add a created_at column"""
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

class TimestampMixin(CreatedAtMixin):
    """Mixin to add created_at and updated_at columns"""
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
