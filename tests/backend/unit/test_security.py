"""
Unit tests for core.security module.
Tests client key derivation, password hashing and header authentication.
"""
import pytest

from kosync.core.errors import Unauthenticated
from kosync.core.security import (
    authenticate,
    client_key,
    hash_password,
    verify_password,
)


class TestClientKey:
    """Tests for the KOReader client key."""

    def test_client_key_is_md5_hex(self):
        """client_key should match what KOReader computes for a password."""
        assert client_key("password") == "5f4dcc3b5aa765d61d8327deb882cf99"

    def test_client_key_is_deterministic(self):
        assert client_key("secret1") == client_key("secret1")
        assert client_key("secret1") != client_key("secret2")


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        key = client_key("TestPassword123")
        assert hash_password(key) != hash_password(key)

    def test_hash_is_not_the_key(self):
        key = client_key("TestPassword123")
        hashed = hash_password(key)
        assert isinstance(hashed, str)
        assert hashed != key
        assert hashed.startswith("$argon2")

    def test_verify_password_correct_and_incorrect(self):
        hashed = hash_password(client_key("TestPassword123"))
        assert verify_password(client_key("TestPassword123"), hashed) is True
        assert verify_password(client_key("WrongPassword456"), hashed) is False

    def test_verify_password_unreadable_hash(self):
        """Legacy or corrupted hashes should fail verification instead of raising."""
        assert verify_password("anything", "5f4dcc3b5aa765d61d8327deb882cf99") is False
        assert verify_password("anything", "") is False


class TestAuthenticate:
    """Tests for the header credential check."""

    pytestmark = pytest.mark.asyncio

    async def test_authenticate_returns_identity(self, db, create_user, repository):
        user, password = await create_user(username="alice", password="secret1")

        identity = await authenticate(repository, "alice", client_key("secret1"))

        assert identity.username == "alice"
        assert identity.is_active is True
        assert identity.is_administrator is False

    async def test_authenticate_reports_inactive_accounts(self, db, create_user, repository):
        await create_user(username="sleepy", password="secret1", is_active=False)

        identity = await authenticate(repository, "sleepy", client_key("secret1"))

        # The policy layer, not the authenticator, turns this into a rejection
        assert identity.is_active is False

    @pytest.mark.parametrize(
        "username,key",
        [
            (None, None),
            ("alice", None),
            (None, "key"),
            ("", "key"),
            ("alice", ""),
        ],
    )
    async def test_authenticate_missing_headers(self, db, repository, username, key):
        with pytest.raises(Unauthenticated):
            await authenticate(repository, username, key)

    async def test_authenticate_wrong_key(self, db, create_user, repository):
        await create_user(username="alice", password="secret1")

        with pytest.raises(Unauthenticated):
            await authenticate(repository, "alice", client_key("nope"))

    async def test_authenticate_unknown_user(self, db, repository):
        with pytest.raises(Unauthenticated):
            await authenticate(repository, "ghost", client_key("secret1"))
