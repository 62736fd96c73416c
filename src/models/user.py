from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, IntegerPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from src.models.company_user import CompanyUser

# Username assigned to invited users until they complete their profile
PLACEHOLDER_USERNAME = "username"


class User(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, server_default="")
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False, server_default=PLACEHOLDER_USERNAME)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, server_default="")
    phone_number: Mapped[str | None] = mapped_column(String(20))
    is_admin: Mapped[bool] = mapped_column(Boolean, server_default="false", nullable=False)
    timezone: Mapped[str | None] = mapped_column(String(50))
    default_company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL")
    )

    # Relationships
    memberships: Mapped[list[CompanyUser]] = relationship(
        "CompanyUser", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
