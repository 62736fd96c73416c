import enum


class CompanyType(str, enum.Enum):
    AGENCY = "agency"
    DEALERSHIP = "dealership"


class CompanyRole(str, enum.Enum):
    """Role stored on a company membership row."""

    USER = "user"
    ADMIN = "admin"


class UserRole(str, enum.Enum):
    """Role resolved for a user within a company, including the global tier."""

    SITE_ADMIN = "site_admin"
    ADMIN = "admin"
    USER = "user"
