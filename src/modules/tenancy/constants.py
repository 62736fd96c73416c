"""Tenancy module constants."""

# Timezone identifiers a user may pick for a company membership
POSSIBLE_TIMEZONES = [
    "US/Alaska",
    "US/Aleutian",
    "US/Arizona",
    "US/Central",
    "US/East-Indiana",
    "US/Eastern",
    "US/Hawaii",
    "US/Indiana-Starke",
    "US/Michigan",
    "US/Mountain",
    "US/Pacific",
    "US/Pacific-New",
    "US/Samoa",
]

# Key inside CompanyUser.config holding the per-company timezone override
CONFIG_KEY_TIMEZONE = "timezone"

# Activity log names
LOG_NAME_MEMBERSHIP = "membership"
LOG_NAME_IMPERSONATION = "impersonation"

# Routes excluded from tenant context extraction
EXCLUDED_ROUTES = [
    "/health",
    "/api/docs",
    "/api/openapi.json",
    "/api/redoc",
]
