"""Unit tests for site-admin impersonation."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.exceptions import ForbiddenException, NotFoundException
from src.models.activity_log import ActivityLog
from src.modules.tenancy.impersonation import can_be_impersonated, can_impersonate, start_impersonation


def _make_user(user_id: int, is_admin: bool = False):
    user = MagicMock()
    user.id = user_id
    user.is_admin = is_admin
    return user


def _mock_session():
    session = AsyncMock()
    session.add = MagicMock()
    return session


def test_only_site_admins_impersonate():
    assert can_impersonate(_make_user(1, is_admin=True)) is True
    assert can_impersonate(_make_user(1)) is False


def test_site_admins_cannot_be_impersonated():
    assert can_be_impersonated(_make_user(1, is_admin=True)) is False
    assert can_be_impersonated(_make_user(1)) is True


@pytest.mark.asyncio
async def test_start_impersonation_records_activity():
    session = _mock_session()
    target = _make_user(5)

    with patch(
        "src.modules.tenancy.impersonation.TenancyRepository.get_user",
        new=AsyncMock(return_value=target),
    ):
        result = await start_impersonation(session, _make_user(1, is_admin=True), 5, reason="support ticket")

    assert result is target
    entry = session.add.call_args[0][0]
    assert isinstance(entry, ActivityLog)
    assert entry.log_name == "impersonation"
    assert entry.causer_id == 1
    assert entry.subject_id == 5
    assert entry.properties == {"reason": "support ticket"}


@pytest.mark.asyncio
async def test_non_admin_cannot_impersonate():
    session = _mock_session()

    with pytest.raises(ForbiddenException):
        await start_impersonation(session, _make_user(1), 5)
    session.add.assert_not_called()


@pytest.mark.asyncio
async def test_cannot_impersonate_self():
    with pytest.raises(ForbiddenException, match="yourself"):
        await start_impersonation(_mock_session(), _make_user(1, is_admin=True), 1)


@pytest.mark.asyncio
async def test_cannot_impersonate_another_site_admin():
    session = _mock_session()

    with patch(
        "src.modules.tenancy.impersonation.TenancyRepository.get_user",
        new=AsyncMock(return_value=_make_user(2, is_admin=True)),
    ):
        with pytest.raises(ForbiddenException, match="cannot be impersonated"):
            await start_impersonation(session, _make_user(1, is_admin=True), 2)
    session.add.assert_not_called()


@pytest.mark.asyncio
async def test_impersonating_unknown_user_fails():
    with patch(
        "src.modules.tenancy.impersonation.TenancyRepository.get_user",
        new=AsyncMock(return_value=None),
    ):
        with pytest.raises(NotFoundException):
            await start_impersonation(_mock_session(), _make_user(1, is_admin=True), 404)
