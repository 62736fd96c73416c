"""Tenancy module API router: context, membership, campaign access and impersonation."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.session import get_db
from src.exceptions import ForbiddenException
from src.models.company import Company
from src.models.company_user import CompanyUser
from src.models.user import User
from src.modules.tenancy.auth import AuthenticatedUser, create_access_token, get_current_user
from src.modules.tenancy.company_schemas import (
    CampaignAccessResponse,
    CampaignResponse,
    CompanyResponse,
    ImpersonateRequest,
    ImpersonationResponse,
    InviteMemberRequest,
    MembershipResponse,
    SwitchCompanyResponse,
    TenantContextResponse,
    UpdateTimezoneRequest,
    UserResponse,
)
from src.modules.tenancy.constants import CONFIG_KEY_TIMEZONE
from src.modules.tenancy.dependencies import (
    get_current_account,
    get_resolver,
    get_tenant_context,
    require_campaign_access,
    require_company_admin,
    require_company_member,
    require_site_admin,
)
from src.modules.tenancy.impersonation import start_impersonation
from src.modules.tenancy.membership_service import MembershipService
from src.modules.tenancy.resolver import TenancyResolver
from src.modules.tenancy.schemas import TenantContext

router = APIRouter(prefix="/tenancy", tags=["tenancy"])


def _membership_response(membership: CompanyUser) -> MembershipResponse:
    return MembershipResponse(
        id=membership.id,
        user_id=membership.user_id,
        company_id=membership.company_id,
        role=membership.role,
        is_active=membership.is_active,
        completed_at=membership.completed_at,
        timezone=(membership.config or {}).get(CONFIG_KEY_TIMEZONE),
    )


# ---------------------------------------------------------------------------
# Context endpoints
# ---------------------------------------------------------------------------


@router.get("/context", response_model=TenantContextResponse)
async def get_context(
    auth_user: AuthenticatedUser = Depends(get_current_user),
    context: TenantContext = Depends(get_tenant_context),
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
):
    """Current user, active company and the role/timezone within it."""
    company = await resolver.get_active_company(account, context.active_company_id)
    role = None
    tz = None
    if company is not None:
        role = await resolver.get_role(account, company)
        tz = await resolver.get_timezone(account, company)

    return TenantContextResponse(
        user_id=account.id,
        is_admin=resolver.is_admin(account),
        is_profile_completed=resolver.is_profile_completed(account),
        has_pending_invitations=await resolver.has_pending_invitations(account),
        active_company=CompanyResponse.model_validate(company) if company else None,
        role=role,
        timezone=tz,
        impersonator_id=auth_user.impersonator_id,
    )


@router.post("/switch-company/{company_id}", response_model=SwitchCompanyResponse)
async def switch_company(
    company_id: int,
    auth_user: AuthenticatedUser = Depends(get_current_user),
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
):
    """Switch the active company. Validates membership and persists it as default."""
    company = await resolver.get_active_company(account, company_id)
    if company is None:
        raise ForbiddenException("You are not a member of this company")

    role = await resolver.get_role(account, company)
    account.default_company_id = company.id
    await resolver.repository.flush()

    token = create_access_token(
        user_id=account.id,
        email=account.email,
        is_admin=bool(account.is_admin),
        company_id=company.id,
        impersonator_id=auth_user.impersonator_id,
    )
    return SwitchCompanyResponse(
        company_id=company.id,
        company_name=company.name,
        role=role,
        access_token=token,
    )


@router.get("/timezones", response_model=list[str])
async def list_timezones(
    account: User = Depends(get_current_account),
):
    """Timezones a user may choose for a company membership."""
    return TenancyResolver.get_possible_timezones()


# ---------------------------------------------------------------------------
# User endpoints
# ---------------------------------------------------------------------------


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    company_id: int | None = Query(None),
    context: TenantContext = Depends(get_tenant_context),
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
):
    """Users visible to the caller: all for site admins, active company for company admins."""
    users = await resolver.get_list_of_users(account, context.active_company_id, company_id)
    return [UserResponse.model_validate(u) for u in users]


@router.post("/impersonate/{user_id}", response_model=ImpersonationResponse)
async def impersonate(
    user_id: int,
    body: ImpersonateRequest,
    admin: User = Depends(require_site_admin),
    db: AsyncSession = Depends(get_db),
):
    """Issue a token acting as another user. Site admins only."""
    target = await start_impersonation(db, admin, user_id, reason=body.reason)
    token = create_access_token(
        user_id=target.id,
        email=target.email,
        is_admin=False,
        company_id=target.default_company_id,
        impersonator_id=admin.id,
    )
    return ImpersonationResponse(access_token=token, user=UserResponse.model_validate(target))


# ---------------------------------------------------------------------------
# Membership endpoints
# ---------------------------------------------------------------------------


@router.get("/companies/{company_id}/members", response_model=list[MembershipResponse])
async def list_members(
    company_id: int,
    admin: User = Depends(require_company_admin),
    db: AsyncSession = Depends(get_db),
):
    """List all memberships of a company. Requires company admin."""
    svc = MembershipService(db)
    memberships = await svc.list_members(company_id)
    return [_membership_response(m) for m in memberships]


@router.post(
    "/companies/{company_id}/invitations",
    response_model=MembershipResponse,
    status_code=201,
)
async def invite_member(
    company_id: int,
    body: InviteMemberRequest,
    admin: User = Depends(require_company_admin),
    db: AsyncSession = Depends(get_db),
):
    """Invite an existing user into the company. Requires company admin."""
    svc = MembershipService(db)
    membership = await svc.invite_user(
        company_id=company_id,
        email=body.email,
        role=body.role,
        invited_by=admin.id,
        timezone_name=body.timezone,
    )
    return _membership_response(membership)


@router.post(
    "/companies/{company_id}/invitations/complete",
    response_model=MembershipResponse,
)
async def complete_invitation(
    company_id: int,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    """Complete the current user's pending invitation for the company."""
    svc = MembershipService(db)
    membership = await svc.complete_invitation(account.id, company_id)
    return _membership_response(membership)


@router.post(
    "/companies/{company_id}/members/{user_id}/activate",
    response_model=MembershipResponse,
)
async def activate_member(
    company_id: int,
    user_id: int,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    svc = MembershipService(db)
    membership = await svc.set_active_state(account, user_id, company_id, active=True)
    return _membership_response(membership)


@router.post(
    "/companies/{company_id}/members/{user_id}/deactivate",
    response_model=MembershipResponse,
)
async def deactivate_member(
    company_id: int,
    user_id: int,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    svc = MembershipService(db)
    membership = await svc.set_active_state(account, user_id, company_id, active=False)
    return _membership_response(membership)


@router.put("/companies/{company_id}/timezone", response_model=MembershipResponse)
async def update_timezone(
    company_id: int,
    body: UpdateTimezoneRequest,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    """Set the current user's timezone override for one company."""
    svc = MembershipService(db)
    membership = await svc.update_timezone(account.id, company_id, body.timezone)
    return _membership_response(membership)


# ---------------------------------------------------------------------------
# Campaign endpoints
# ---------------------------------------------------------------------------


@router.get("/companies/{company_id}/campaigns", response_model=list[CampaignResponse])
async def list_company_campaigns(
    company: Company = Depends(require_company_member),
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
):
    """Campaigns granted to the current user for this company."""
    campaigns = await resolver.get_campaigns_for_company(account, company)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.get("/campaigns/{campaign_id}/access", response_model=CampaignAccessResponse)
async def check_campaign_access(
    campaign_id: int,
    account: User = Depends(get_current_account),
    resolver: TenancyResolver = Depends(get_resolver),
):
    """Whether the current user holds an explicit grant on the campaign."""
    has_access = await resolver.has_access_to_campaign(account, campaign_id)
    return CampaignAccessResponse(campaign_id=campaign_id, has_access=has_access)


@router.get("/campaigns/{campaign_id}/gate", status_code=204)
async def campaign_gate(
    campaign_id: int,
    account: User = Depends(require_campaign_access),
):
    """Gate for route layers: 204 when the campaign may be viewed, 403 otherwise."""
    return None
