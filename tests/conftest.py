"""Pytest fixtures for API tests against the FastAPI app with a mocked store."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.app import app, limiter
from src.database.session import get_db
from src.models.company import Company
from src.models.company_user import CompanyUser
from src.models.enums import CompanyRole, CompanyType
from src.models.user import User
from src.modules.tenancy.auth import AuthenticatedUser, get_current_user
from src.modules.tenancy.dependencies import get_current_account, get_resolver
from src.modules.tenancy.repository import TenancyRepository
from src.modules.tenancy.resolver import TenancyResolver


def make_user(user_id: int = 1, is_admin: bool = False, **overrides) -> User:
    fields = {
        "id": user_id,
        "first_name": "Dana",
        "last_name": "Reyes",
        "email": f"user{user_id}@northside.example",
        "username": f"user{user_id}",
        "password_hash": "hashed",
        "is_admin": is_admin,
        "timezone": None,
        "default_company_id": None,
    }
    fields.update(overrides)
    return User(**fields)


def make_company(company_id: int = 1, company_type: CompanyType = CompanyType.DEALERSHIP) -> Company:
    return Company(id=company_id, name=f"Company {company_id}", type=company_type)


def make_membership(
    user_id: int = 1,
    company_id: int = 1,
    role: CompanyRole = CompanyRole.USER,
    config: dict | None = None,
) -> CompanyUser:
    return CompanyUser(
        id=user_id * 100 + company_id,
        user_id=user_id,
        company_id=company_id,
        role=role,
        config=config or {},
        is_active=True,
        completed_at=None,
    )


@pytest.fixture
def db_session() -> AsyncMock:
    """Session whose queries find nothing unless a test says otherwise."""
    session = AsyncMock()
    session.add = MagicMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    result.scalar.return_value = 0
    session.execute.return_value = result
    return session


@pytest.fixture
def repository() -> AsyncMock:
    repo = AsyncMock(spec=TenancyRepository)
    repo.find_membership.return_value = None
    repo.lock_membership.return_value = None
    repo.get_member_company.return_value = None
    repo.get_company.return_value = None
    repo.count_memberships.return_value = 0
    repo.count_memberships_by_company_type.return_value = 0
    repo.count_pending_invitations.return_value = 0
    repo.has_campaign_grant.return_value = False
    repo.list_users.return_value = []
    repo.list_company_users.return_value = []
    return repo


@pytest.fixture
def account() -> User:
    return make_user(1)


@pytest.fixture
def auth_user(account: User) -> AuthenticatedUser:
    return AuthenticatedUser(id=account.id, email=account.email)


@pytest_asyncio.fixture
async def async_client(
    db_session: AsyncMock,
    repository: AsyncMock,
    account: User,
    auth_user: AuthenticatedUser,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient wired to the app with mocked auth and store."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: auth_user
    app.dependency_overrides[get_current_account] = lambda: account
    app.dependency_overrides[get_resolver] = lambda: TenancyResolver(repository)
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
