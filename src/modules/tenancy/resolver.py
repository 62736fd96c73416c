"""Role resolution, active-company scoping and campaign access decisions.

Operations come in two kinds and must stay that way:

* Capability probes (``is_*``, ``has_*``, ``belongs_to_company``,
  ``get_active_company``, ``get_list_of_users``) are safe to call without a
  prior membership check and answer ``False`` / ``None`` / ``[]`` when the
  membership is absent.
* Precondition lookups (``get_role``, ``get_timezone``, ``is_active``,
  ``activate``, ``deactivate``) assume the caller already verified
  membership and raise ``NotFoundException`` otherwise. They never guess a
  default role.
"""

import logging

from src.exceptions import NotFoundException
from src.models.campaign import Campaign
from src.models.company import Company
from src.models.company_user import CompanyUser
from src.models.enums import CompanyRole, CompanyType, UserRole
from src.models.user import PLACEHOLDER_USERNAME, User
from src.modules.tenancy.constants import CONFIG_KEY_TIMEZONE, POSSIBLE_TIMEZONES
from src.modules.tenancy.repository import TenancyRepository

logger = logging.getLogger(__name__)


class TenancyResolver:
    def __init__(self, repository: TenancyRepository):
        self.repository = repository

    # ------------------------------------------------------------------
    # Capability probes
    # ------------------------------------------------------------------

    @staticmethod
    def is_admin(user: User) -> bool:
        """Global site admin. Short-circuits every per-company check."""
        return bool(user.is_admin)

    async def is_company_admin(self, user: User, company_id: int | None) -> bool:
        if self.is_admin(user):
            return True
        if company_id is None:
            return False
        membership = await self.repository.find_membership(user.id, company_id)
        return membership is not None and membership.role == CompanyRole.ADMIN

    async def is_company_user(self, user: User, company_id: int) -> bool:
        """True only for the ``user`` tier; admin-role members answer False."""
        membership = await self.repository.find_membership(user.id, company_id)
        return membership is not None and membership.role == CompanyRole.USER

    async def is_agency_user(self, user: User, company_id: int | None = None) -> bool:
        count = await self.repository.count_memberships_by_company_type(
            user.id, CompanyType.AGENCY, company_id
        )
        return count > 0

    async def is_dealership_user(self, user: User, company_id: int | None = None) -> bool:
        count = await self.repository.count_memberships_by_company_type(
            user.id, CompanyType.DEALERSHIP, company_id
        )
        return count > 0

    async def belongs_to_company(self, user: User, company: Company) -> bool:
        """Exactly one membership row. Duplicates are reported, not repaired."""
        count = await self.repository.count_memberships(user.id, company.id)
        if count > 1:
            logger.warning(
                "Duplicate memberships for user=%s company=%s (count=%s)",
                user.id,
                company.id,
                count,
            )
        return count == 1

    async def has_access_to_campaign(self, user: User, campaign_id: int) -> bool:
        return await self.repository.has_campaign_grant(user.id, campaign_id)

    async def has_pending_invitations(self, user: User) -> bool:
        if self.is_admin(user):
            return False
        return await self.repository.count_pending_invitations(user.id) > 0

    async def is_company_profile_ready(self, user: User, company: Company) -> bool:
        return await self.repository.count_completed_memberships(user.id, company.id) > 0

    @staticmethod
    def is_profile_completed(user: User) -> bool:
        return bool(user.password_hash) and user.username != PLACEHOLDER_USERNAME

    async def get_active_company(
        self, user: User, active_company_id: int | None
    ) -> Company | None:
        """Resolve the session-selected company, only if the user is a member.

        This is the tenant-isolation boundary: never replace it with a plain
        lookup by id, which would expose another tenant's company.
        """
        if active_company_id is None:
            return None
        return await self.repository.get_member_company(user.id, active_company_id)

    async def get_list_of_users(
        self,
        user: User,
        active_company_id: int | None,
        company_id: int | None = None,
    ) -> list[User]:
        """Users the caller may see.

        Site admins see everyone, or one company's users when ``company_id``
        is given. Company admins see the users of their *active* company;
        ``company_id`` is ignored for them. Everyone else sees nothing.
        """
        if self.is_admin(user):
            if company_id is None:
                return await self.repository.list_users()
            await self._require_company(company_id)
            return await self.repository.list_company_users(company_id)
        if await self.is_company_admin(user, active_company_id):
            await self._require_company(active_company_id)
            return await self.repository.list_company_users(active_company_id)
        return []

    async def get_campaigns_for_company(self, user: User, company: Company) -> list[Campaign]:
        return await self.repository.list_granted_campaigns(user.id, company.id)

    @staticmethod
    def get_possible_timezones() -> list[str]:
        return list(POSSIBLE_TIMEZONES)

    # ------------------------------------------------------------------
    # Precondition lookups
    # ------------------------------------------------------------------

    async def get_role(self, user: User, company: Company) -> UserRole:
        if self.is_admin(user):
            return UserRole.SITE_ADMIN
        membership = await self._require_membership(user.id, company.id)
        return UserRole(membership.role.value)

    async def get_timezone(self, user: User, company: Company) -> str | None:
        if self.is_admin(user):
            return None
        membership = await self._require_membership(user.id, company.id)
        return (membership.config or {}).get(CONFIG_KEY_TIMEZONE)

    async def is_active(self, user: User, company_id: int) -> bool:
        membership = await self._require_membership(user.id, company_id)
        return bool(membership.is_active)

    async def activate(self, user: User, company_id: int) -> CompanyUser:
        return await self._set_active(user, company_id, True)

    async def deactivate(self, user: User, company_id: int) -> CompanyUser:
        return await self._set_active(user, company_id, False)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _set_active(self, user: User, company_id: int, active: bool) -> CompanyUser:
        membership = await self.repository.lock_membership(user.id, company_id)
        if membership is None:
            raise NotFoundException(
                f"User {user.id} has no membership in company {company_id}"
            )
        membership.is_active = active
        await self.repository.flush()
        return membership

    async def _require_membership(self, user_id: int, company_id: int) -> CompanyUser:
        membership = await self.repository.find_membership(user_id, company_id)
        if membership is None:
            raise NotFoundException(
                f"User {user_id} has no membership in company {company_id}"
            )
        return membership

    async def _require_company(self, company_id: int) -> Company:
        company = await self.repository.get_company(company_id)
        if company is None:
            raise NotFoundException(f"Company {company_id} not found")
        return company
