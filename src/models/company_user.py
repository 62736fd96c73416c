from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from src.models.enums import CompanyRole

if TYPE_CHECKING:
    from src.models.company import Company
    from src.models.user import User


class CompanyUser(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """Membership (and invitation) of a user in a company."""

    __tablename__ = "company_user"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[CompanyRole] = mapped_column(
        Enum(CompanyRole, name="companyrole", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        server_default="user",
    )
    config: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    is_active: Mapped[bool] = mapped_column(Boolean, server_default="true", nullable=False)
    # Null until the invited user finishes registration for this company
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="memberships")
    company: Mapped[Company] = relationship("Company", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("user_id", "company_id", name="uq_company_user_user_company"),
        Index("ix_company_user_user_id", "user_id"),
        Index("ix_company_user_company_id", "company_id"),
    )
