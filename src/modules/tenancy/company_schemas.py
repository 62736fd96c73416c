"""Pydantic v2 schemas for tenancy API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import CompanyRole, CompanyType, UserRole


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class InviteMemberRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    role: CompanyRole = CompanyRole.USER
    timezone: str | None = None


class UpdateTimezoneRequest(BaseModel):
    timezone: str


class ImpersonateRequest(BaseModel):
    reason: str | None = Field(None, max_length=255)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: CompanyType


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    username: str
    is_admin: bool
    timezone: str | None = None


class MembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company_id: int
    role: CompanyRole
    is_active: bool
    completed_at: datetime | None = None
    timezone: str | None = None


class CampaignResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    agency_id: int
    dealership_id: int


class TenantContextResponse(BaseModel):
    user_id: int
    is_admin: bool
    is_profile_completed: bool
    has_pending_invitations: bool
    active_company: CompanyResponse | None = None
    role: UserRole | None = None
    timezone: str | None = None
    impersonator_id: int | None = None


class CampaignAccessResponse(BaseModel):
    campaign_id: int
    has_access: bool


class SwitchCompanyResponse(BaseModel):
    company_id: int
    company_name: str
    role: UserRole
    access_token: str


class ImpersonationResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
