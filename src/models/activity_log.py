from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.database.base import Base, IntegerPrimaryKeyMixin


class ActivityLog(IntegerPrimaryKeyMixin, Base):
    """Append-only audit trail for privileged tenancy actions."""

    __tablename__ = "activity_log"

    log_name: Mapped[str] = mapped_column(String(50), nullable=False, server_default="default")
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    subject_type: Mapped[str | None] = mapped_column(String(100))
    subject_id: Mapped[int | None] = mapped_column(Integer)
    causer_id: Mapped[int | None] = mapped_column(Integer)
    properties: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_activity_log_subject", "subject_type", "subject_id"),
        Index("ix_activity_log_causer_id", "causer_id"),
    )
