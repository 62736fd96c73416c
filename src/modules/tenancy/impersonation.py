"""Site-admin impersonation with an audit trail."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import ForbiddenException, NotFoundException
from src.models.user import User
from src.modules.tenancy.activity import record_activity
from src.modules.tenancy.constants import LOG_NAME_IMPERSONATION
from src.modules.tenancy.repository import TenancyRepository
from src.modules.tenancy.resolver import TenancyResolver

logger = logging.getLogger(__name__)


def can_impersonate(user: User) -> bool:
    return TenancyResolver.is_admin(user)


def can_be_impersonated(user: User) -> bool:
    return not TenancyResolver.is_admin(user)


async def start_impersonation(
    session: AsyncSession,
    actor: User,
    target_user_id: int,
    reason: str | None = None,
) -> User:
    """Validate an impersonation request and record it.

    The activity entry is flushed before the target is returned.
    """
    if not can_impersonate(actor):
        raise ForbiddenException("Only site admins can impersonate users")
    if actor.id == target_user_id:
        raise ForbiddenException("Cannot impersonate yourself")

    target = await TenancyRepository(session).get_user(target_user_id)
    if target is None:
        raise NotFoundException(f"User {target_user_id} not found")
    if not can_be_impersonated(target):
        raise ForbiddenException("Site admins cannot be impersonated")

    await record_activity(
        session,
        LOG_NAME_IMPERSONATION,
        "started",
        causer_id=actor.id,
        subject_type="user",
        subject_id=target.id,
        properties={"reason": reason} if reason else {},
    )
    logger.info("User %s started impersonating user %s", actor.id, target.id)
    return target
