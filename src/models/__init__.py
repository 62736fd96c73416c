# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from src.models.activity_log import ActivityLog
from src.models.campaign import Campaign, campaign_user
from src.models.company import Company
from src.models.company_user import CompanyUser
from src.models.enums import CompanyRole, CompanyType, UserRole
from src.models.user import User

__all__ = [
    "ActivityLog",
    "Campaign",
    "Company",
    "CompanyRole",
    "CompanyType",
    "CompanyUser",
    "User",
    "UserRole",
    "campaign_user",
]
