"""FastAPI dependency functions for tenant context and authorization gates."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.session import get_db
from src.exceptions import ForbiddenException, NotFoundException, UnauthorizedException
from src.models.company import Company
from src.models.user import User
from src.modules.tenancy.auth import AuthenticatedUser, get_current_user
from src.modules.tenancy.repository import TenancyRepository
from src.modules.tenancy.resolver import TenancyResolver
from src.modules.tenancy.schemas import TenantContext


def get_resolver(db: AsyncSession = Depends(get_db)) -> TenancyResolver:
    return TenancyResolver(TenancyRepository(db))


async def get_current_account(
    auth_user: AuthenticatedUser = Depends(get_current_user),
    resolver: TenancyResolver = Depends(get_resolver),
) -> User:
    """Load the authenticated user's row. Role flags are always read from the DB."""
    user = await resolver.repository.get_user(auth_user.id)
    if user is None:
        raise UnauthorizedException("Authenticated user no longer exists")
    return user


def get_tenant_context(
    request: Request,
    auth_user: AuthenticatedUser = Depends(get_current_user),
    account: User = Depends(get_current_account),
) -> TenantContext:
    """Build the explicit tenant context passed into resolver calls."""
    context = TenantContext(
        user_id=account.id,
        active_company_id=auth_user.active_company_id,
        is_admin=bool(account.is_admin),
    )
    request.state.tenant_context = context
    return context


async def require_tenant(
    context: TenantContext = Depends(get_tenant_context),
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
) -> Company:
    """Resolve the active company, refusing ids the user is not a member of."""
    if context.active_company_id is None:
        raise UnauthorizedException("No active company selected")
    company = await resolver.get_active_company(account, context.active_company_id)
    if company is None:
        raise ForbiddenException("You are not a member of the selected company")
    return company


def require_site_admin(account: User = Depends(get_current_account)) -> User:
    if not TenancyResolver.is_admin(account):
        raise ForbiddenException("Site admin access required")
    return account


async def require_company_admin(
    company_id: int,
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
) -> User:
    if not await resolver.is_company_admin(account, company_id):
        raise ForbiddenException("Company admin role required")
    return account


async def require_company_member(
    company_id: int,
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
) -> Company:
    """Company the user belongs to. Site admins may open any existing company."""
    company = await resolver.repository.get_company(company_id)
    if company is None:
        raise NotFoundException(f"Company {company_id} not found")
    if resolver.is_admin(account):
        return company
    if not await resolver.belongs_to_company(account, company):
        raise ForbiddenException("You are not a member of this company")
    return company


async def require_campaign_access(
    campaign_id: int,
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
) -> User:
    if resolver.is_admin(account):
        return account
    if not await resolver.has_access_to_campaign(account, campaign_id):
        raise ForbiddenException("You do not have access to this campaign")
    return account
