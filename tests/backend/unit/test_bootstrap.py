"""
Unit tests for core.bootstrap module.
"""
import pytest

from kosync.config import Settings
from kosync.core.bootstrap import ensure_default_admin
from kosync.core.security import authenticate, client_key


pytestmark = pytest.mark.asyncio


async def test_creates_reserved_admin(db, repository):
    admin = await ensure_default_admin(repository, Settings(admin_password="s3cret"))

    assert admin.username == "admin"
    identity = await authenticate(repository, "admin", client_key("s3cret"))
    assert identity.is_active is True
    assert identity.is_administrator is True


async def test_is_idempotent_and_repairs_admin(db, repository):
    await ensure_default_admin(repository, Settings(admin_password="first"))
    await repository.update_account("admin", is_active=False, is_administrator=False)

    await ensure_default_admin(repository, Settings(admin_password="second"))

    users = [u for u in await repository.list_users() if u.username == "admin"]
    assert len(users) == 1
    assert users[0].is_active is True
    assert users[0].is_administrator is True
    identity = await authenticate(repository, "admin", client_key("second"))
    assert identity.username == "admin"


async def test_defaults_admin_password(db, repository, caplog):
    await ensure_default_admin(repository, Settings(admin_password=None))

    identity = await authenticate(repository, "admin", client_key("admin"))
    assert identity.username == "admin"
    assert "ADMIN_PASSWORD not set" in caplog.text
