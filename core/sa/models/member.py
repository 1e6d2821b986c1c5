# core/sa/models/member.py
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin, new_id, utcnow
from enum import Enum

class MembershipType(str, Enum):
    REGULAR = "regular"
    PREMIUM = "premium"
    STUDENT = "student"

class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"

class Member(Base, TimestampMixin):
    __tablename__ = 'members'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)  # not unique, families share addresses
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    place: Mapped[str | None] = mapped_column(String(255), nullable=True)
    member_class: Mapped[str | None] = mapped_column('class', String(50), nullable=True)
    register_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    membership_type: Mapped[str] = mapped_column(String(20), nullable=False, default=MembershipType.REGULAR.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=MemberStatus.ACTIVE.value)
    membership_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_members_name', 'name'),
        Index('idx_members_email', 'email'),
    )

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE.value
