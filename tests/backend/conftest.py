import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from kosync.config import Settings, get_settings
from kosync.core import db as db_module
from kosync.core.security import client_key, hash_password
from kosync.main import app
from kosync.repositories import TortoiseKosyncRepository, UserAccount


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client (service/repository tests).
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def repository():
    return TortoiseKosyncRepository()


@pytest.fixture
def app_settings():
    """
    Settings injected into the app for one test; mutate before requests.
    """
    test_settings = Settings(registration_enabled=True, admin_password="admin-secret", trusted_proxies=[])
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield test_settings
    app.dependency_overrides.pop(get_settings, None)


@pytest_asyncio.fixture
async def client(db, app_settings):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture
def auth_headers():
    """
    Helper fixture building the headers a KOReader device sends for a plaintext password.
    """

    def _get_headers(username: str, password: str) -> dict[str, str]:
        return {"x-auth-user": username, "x-auth-key": client_key(password)}

    return _get_headers


@pytest_asyncio.fixture
async def create_user(repository):
    """
    Factory fixture to create regular users directly through the repository.
    """

    async def _create_user(
        username: str | None = None,
        password: str = "UserPass!23",
        is_active: bool = True,
    ) -> tuple[UserAccount, str]:
        user = await repository.create_user(
            UserAccount(
                username=username or f"user_{uuid.uuid4().hex[:6]}",
                password_hash=hash_password(client_key(password)),
                is_active=is_active,
            )
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_admin(repository):
    """
    Factory fixture to create administrator accounts for privileged endpoints.
    """

    async def _create_admin(password: str = "AdminPass!23", is_active: bool = True) -> tuple[UserAccount, str]:
        user = await repository.create_user(
            UserAccount(
                username=f"admin_{uuid.uuid4().hex[:6]}",
                password_hash=hash_password(client_key(password)),
                is_active=is_active,
                is_administrator=True,
            )
        )
        return user, password

    return _create_admin
