"""Activity log writer for privileged tenancy actions."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


async def record_activity(
    session: AsyncSession,
    log_name: str,
    description: str,
    causer_id: int | None,
    subject_type: str | None = None,
    subject_id: int | None = None,
    properties: dict | None = None,
) -> ActivityLog:
    """Add an activity entry to the current unit of work and flush it."""
    entry = ActivityLog(
        log_name=log_name,
        description=description,
        causer_id=causer_id,
        subject_type=subject_type,
        subject_id=subject_id,
        properties=properties or {},
    )
    session.add(entry)
    await session.flush()
    logger.info(
        "Activity %s/%s causer=%s subject=%s:%s",
        log_name,
        description,
        causer_id,
        subject_type,
        subject_id,
    )
    return entry
