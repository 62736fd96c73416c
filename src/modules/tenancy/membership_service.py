"""Membership lifecycle service -- invite, complete, activate, deactivate."""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import (
    BusinessRuleException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from src.models.company_user import CompanyUser
from src.models.enums import CompanyRole
from src.models.user import User
from src.modules.tenancy.activity import record_activity
from src.modules.tenancy.constants import (
    CONFIG_KEY_TIMEZONE,
    LOG_NAME_MEMBERSHIP,
    POSSIBLE_TIMEZONES,
)
from src.modules.tenancy.repository import TenancyRepository
from src.modules.tenancy.resolver import TenancyResolver

logger = logging.getLogger(__name__)


def _validate_timezone(tz: str) -> None:
    if tz not in POSSIBLE_TIMEZONES:
        raise ValidationException(
            f"Unsupported timezone '{tz}'",
            details=[{"field": "timezone", "message": "must be one of the allowed US timezones"}],
        )


class MembershipService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = TenancyRepository(db)
        self.resolver = TenancyResolver(self.repository)

    async def invite_user(
        self,
        company_id: int,
        email: str,
        role: CompanyRole,
        invited_by: int,
        timezone_name: str | None = None,
    ) -> CompanyUser:
        """Create a pending membership. Registration completes it later."""
        company = await self.repository.get_company(company_id)
        if company is None:
            raise NotFoundException(f"Company {company_id} not found")

        if timezone_name is not None:
            _validate_timezone(timezone_name)

        user = await self.repository.get_user_by_email(email)
        if user is None:
            raise NotFoundException(f"User with email '{email}' not found")

        existing = await self.repository.find_membership(user.id, company_id)
        if existing is not None:
            raise ConflictException(
                f"User '{email}' already has a membership in this company"
            )

        config = {CONFIG_KEY_TIMEZONE: timezone_name} if timezone_name else {}
        membership = CompanyUser(
            user_id=user.id,
            company_id=company_id,
            role=role,
            config=config,
            is_active=True,
            completed_at=None,
        )
        self.repository.add(membership)
        await self.repository.flush()
        await record_activity(
            self.db,
            LOG_NAME_MEMBERSHIP,
            "invited",
            causer_id=invited_by,
            subject_type="company_user",
            subject_id=membership.id,
            properties={"company_id": company_id, "user_id": user.id, "role": role.value},
        )
        return membership

    async def complete_invitation(self, user_id: int, company_id: int) -> CompanyUser:
        """Mark registration for the company as finished. Happens exactly once."""
        membership = await self.repository.lock_membership(user_id, company_id)
        if membership is None:
            raise NotFoundException("No invitation found for this company")
        if membership.completed_at is not None:
            raise BusinessRuleException("Invitation has already been completed")

        membership.completed_at = datetime.now(timezone.utc)
        await self.repository.flush()
        return membership

    async def set_active_state(
        self,
        actor: User,
        user_id: int,
        company_id: int,
        active: bool,
    ) -> CompanyUser:
        """Activate or deactivate a member on behalf of a company admin.

        The actor's admin row is share-locked before the target row is
        locked for update. A concurrent demotion of the actor waits for
        this transaction to finish.
        """
        await self._require_locked_company_admin(actor, company_id)

        target = await self.repository.get_user(user_id)
        if target is None:
            raise NotFoundException(f"User {user_id} not found")

        if active:
            membership = await self.resolver.activate(target, company_id)
        else:
            membership = await self.resolver.deactivate(target, company_id)

        await record_activity(
            self.db,
            LOG_NAME_MEMBERSHIP,
            "activated" if active else "deactivated",
            causer_id=actor.id,
            subject_type="company_user",
            subject_id=membership.id,
            properties={"company_id": company_id, "user_id": user_id},
        )
        return membership

    async def update_timezone(self, user_id: int, company_id: int, timezone_name: str) -> CompanyUser:
        _validate_timezone(timezone_name)
        membership = await self.repository.lock_membership(user_id, company_id)
        if membership is None:
            raise NotFoundException(
                f"User {user_id} has no membership in company {company_id}"
            )
        # JSONB is not mutation-tracked; assign a new dict
        membership.config = {**(membership.config or {}), CONFIG_KEY_TIMEZONE: timezone_name}
        await self.repository.flush()
        return membership

    async def list_members(self, company_id: int) -> list[CompanyUser]:
        """List company memberships with user details."""
        return await self.repository.list_members(company_id)

    async def _require_locked_company_admin(self, actor: User, company_id: int) -> None:
        if self.resolver.is_admin(actor):
            return
        membership = await self.repository.lock_membership(actor.id, company_id, read=True)
        if membership is None or membership.role != CompanyRole.ADMIN:
            raise ForbiddenException("Company admin role required")
