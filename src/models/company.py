from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from src.models.enums import CompanyType

if TYPE_CHECKING:
    from src.models.company_user import CompanyUser


class Company(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[CompanyType] = mapped_column(
        Enum(CompanyType, name="companytype", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    # Relationships
    memberships: Mapped[list[CompanyUser]] = relationship(
        "CompanyUser", back_populates="company", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_companies_type", "type"),
    )
