"""Pydantic schemas for tenant context."""

from pydantic import BaseModel


class TenantContext(BaseModel):
    """Tenant context extracted from an authenticated request.

    ``active_company_id`` is the session-selected company as claimed by the
    client. It is not trusted on its own: resolve it through
    ``TenancyResolver.get_active_company`` before reading tenant data.
    """

    user_id: int
    active_company_id: int | None = None
    is_admin: bool = False
