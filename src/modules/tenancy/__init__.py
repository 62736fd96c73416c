"""Tenancy module: role resolution and active-company isolation for agencies and dealerships."""

from src.modules.tenancy.auth import AuthenticatedUser, create_access_token, get_current_user
from src.modules.tenancy.dependencies import (
    get_current_account,
    get_resolver,
    get_tenant_context,
    require_campaign_access,
    require_company_admin,
    require_company_member,
    require_site_admin,
    require_tenant,
)
from src.modules.tenancy.impersonation import can_be_impersonated, can_impersonate, start_impersonation
from src.modules.tenancy.membership_service import MembershipService
from src.modules.tenancy.middleware import TenantContextMiddleware
from src.modules.tenancy.repository import TenancyRepository
from src.modules.tenancy.resolver import TenancyResolver
from src.modules.tenancy.schemas import TenantContext

__all__ = [
    # Schemas
    "TenantContext",
    # Auth
    "AuthenticatedUser",
    "create_access_token",
    "get_current_user",
    # Middleware
    "TenantContextMiddleware",
    # Dependencies
    "get_current_account",
    "get_resolver",
    "get_tenant_context",
    "require_tenant",
    "require_site_admin",
    "require_company_admin",
    "require_company_member",
    "require_campaign_access",
    # Core
    "TenancyRepository",
    "TenancyResolver",
    "MembershipService",
    # Impersonation
    "can_impersonate",
    "can_be_impersonated",
    "start_impersonation",
]
