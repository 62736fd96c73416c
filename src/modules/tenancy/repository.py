"""Explicit store handle for tenancy decisions.

Every membership, company and grant lookup the resolver needs goes through
this class, so authorization never depends on lazily loaded relationships.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from src.models.campaign import Campaign, campaign_user
from src.models.company import Company
from src.models.company_user import CompanyUser
from src.models.enums import CompanyType
from src.models.user import User


class TenancyRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # -- memberships -------------------------------------------------------

    async def find_membership(self, user_id: int, company_id: int) -> CompanyUser | None:
        """Return the first membership row for the pair, if any."""
        result = await self.db.execute(
            select(CompanyUser)
            .where(
                CompanyUser.user_id == user_id,
                CompanyUser.company_id == company_id,
            )
            .order_by(CompanyUser.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def lock_membership(
        self, user_id: int, company_id: int, read: bool = False
    ) -> CompanyUser | None:
        """Fetch the membership row with a row-level lock held until commit.

        ``read=True`` takes a shared lock (``FOR SHARE``): concurrent readers
        pass, writers wait until this transaction ends.
        """
        result = await self.db.execute(
            select(CompanyUser)
            .where(
                CompanyUser.user_id == user_id,
                CompanyUser.company_id == company_id,
            )
            .order_by(CompanyUser.id)
            .limit(1)
            .with_for_update(read=read)
        )
        return result.scalar_one_or_none()

    async def count_memberships(self, user_id: int, company_id: int) -> int:
        result = await self.db.execute(
            select(func.count(CompanyUser.id)).where(
                CompanyUser.user_id == user_id,
                CompanyUser.company_id == company_id,
            )
        )
        return result.scalar() or 0

    async def count_memberships_by_company_type(
        self,
        user_id: int,
        company_type: CompanyType,
        company_id: int | None = None,
    ) -> int:
        query = (
            select(func.count(CompanyUser.id))
            .join(Company, Company.id == CompanyUser.company_id)
            .where(
                CompanyUser.user_id == user_id,
                Company.type == company_type,
            )
        )
        if company_id is not None:
            query = query.where(Company.id == company_id)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def count_pending_invitations(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(CompanyUser.id)).where(
                CompanyUser.user_id == user_id,
                CompanyUser.completed_at.is_(None),
            )
        )
        return result.scalar() or 0

    async def count_completed_memberships(self, user_id: int, company_id: int) -> int:
        result = await self.db.execute(
            select(func.count(CompanyUser.id)).where(
                CompanyUser.user_id == user_id,
                CompanyUser.company_id == company_id,
                CompanyUser.completed_at.is_not(None),
            )
        )
        return result.scalar() or 0

    async def list_members(self, company_id: int) -> list[CompanyUser]:
        result = await self.db.execute(
            select(CompanyUser)
            .options(joinedload(CompanyUser.user))
            .where(CompanyUser.company_id == company_id)
            .order_by(CompanyUser.id)
        )
        return list(result.unique().scalars().all())

    # -- companies ---------------------------------------------------------

    async def get_company(self, company_id: int) -> Company | None:
        result = await self.db.execute(select(Company).where(Company.id == company_id))
        return result.scalar_one_or_none()

    async def get_member_company(self, user_id: int, company_id: int) -> Company | None:
        """Return the company only when the user holds a membership in it."""
        result = await self.db.execute(
            select(Company)
            .join(CompanyUser, CompanyUser.company_id == Company.id)
            .where(
                Company.id == company_id,
                CompanyUser.user_id == user_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    # -- users -------------------------------------------------------------

    async def get_user(self, user_id: int) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def list_company_users(self, company_id: int) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(CompanyUser, CompanyUser.user_id == User.id)
            .where(CompanyUser.company_id == company_id)
            .order_by(User.id)
        )
        return list(result.scalars().all())

    # -- campaigns ---------------------------------------------------------

    async def has_campaign_grant(self, user_id: int, campaign_id: int) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(campaign_user)
            .where(
                campaign_user.c.user_id == user_id,
                campaign_user.c.campaign_id == campaign_id,
            )
        )
        return (result.scalar() or 0) > 0

    async def list_granted_campaigns(self, user_id: int, company_id: int) -> list[Campaign]:
        """Campaigns granted to the user where the company is agency or dealership."""
        result = await self.db.execute(
            select(Campaign)
            .join(campaign_user, campaign_user.c.campaign_id == Campaign.id)
            .where(
                campaign_user.c.user_id == user_id,
                or_(
                    Campaign.agency_id == company_id,
                    Campaign.dealership_id == company_id,
                ),
            )
            .order_by(Campaign.id)
        )
        return list(result.scalars().all())

    # -- writes ------------------------------------------------------------

    def add(self, instance) -> None:
        self.db.add(instance)

    async def flush(self) -> None:
        await self.db.flush()
