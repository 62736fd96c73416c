"""Tests for JWT decoding and active-company extraction."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from src.exceptions import UnauthorizedException
from src.modules.tenancy.auth import create_access_token, get_current_user


def _request(active_company_id: int | None = None):
    request = MagicMock()
    request.state = SimpleNamespace()
    if active_company_id is not None:
        request.state.active_company_id = active_company_id
    return request


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_token_claims_become_authenticated_user():
    token = create_access_token(user_id=7, email="rep@dealer.com", company_id=3)
    request = _request()

    user = await get_current_user(request, _credentials(token))

    assert user.id == 7
    assert user.email == "rep@dealer.com"
    assert user.is_admin is False
    assert user.active_company_id == 3
    assert user.impersonator_id is None
    assert request.state.user is user


@pytest.mark.asyncio
async def test_header_selection_overrides_token_company():
    token = create_access_token(user_id=7, email="rep@dealer.com", company_id=3)

    user = await get_current_user(_request(active_company_id=9), _credentials(token))
    assert user.active_company_id == 9


@pytest.mark.asyncio
async def test_impersonation_claim_is_carried():
    token = create_access_token(user_id=7, email="rep@dealer.com", impersonator_id=1)

    user = await get_current_user(_request(), _credentials(token))
    assert user.impersonator_id == 1
    assert user.active_company_id is None


@pytest.mark.asyncio
async def test_missing_credentials_rejected():
    with pytest.raises(UnauthorizedException, match="Authentication required"):
        await get_current_user(_request(), None)


@pytest.mark.asyncio
async def test_tampered_token_rejected():
    token = create_access_token(user_id=7, email="rep@dealer.com")

    with pytest.raises(UnauthorizedException, match="Invalid or expired"):
        await get_current_user(_request(), _credentials(token + "x"))
