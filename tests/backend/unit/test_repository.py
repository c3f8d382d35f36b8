"""
Unit tests for the Tortoise repository against an in-memory database.
"""
import datetime as dt
from decimal import Decimal

import pytest

from kosync.repositories import DuplicateKeyError, Progress, UserAccount


pytestmark = pytest.mark.asyncio


def make_progress(document_hash: str, percentage: str = "0.5") -> Progress:
    return Progress(
        document_hash=document_hash,
        progress="12",
        percentage=Decimal(percentage),
        device="Kobo",
        device_id="device-1",
        timestamp=dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.timezone.utc),
    )


async def test_create_and_lookup(db, repository):
    created = await repository.create_user(UserAccount(username="alice", password_hash="h"))
    assert created.id

    by_name = await repository.get_user_by_username("alice")
    by_id = await repository.get_user_by_id(created.id)
    assert by_name == by_id
    assert by_name.is_active is True
    assert by_name.is_administrator is False
    assert by_name.documents == {}


async def test_lookup_misses(db, repository):
    assert await repository.get_user_by_username("ghost") is None
    assert await repository.get_user_by_id("not-a-uuid") is None
    assert await repository.get_user_by_id("00000000-0000-0000-0000-000000000000") is None


async def test_create_duplicate_raises_duplicate_key(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))
    with pytest.raises(DuplicateKeyError):
        await repository.create_user(UserAccount(username="alice", password_hash="other"))


async def test_upsert_creates_then_replaces(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))

    assert await repository.upsert_document("alice", make_progress("doc", "0.1"))
    assert await repository.upsert_document("alice", make_progress("doc", "0.9"))

    stored = await repository.get_document("alice", "doc")
    assert stored.percentage == Decimal("0.9")
    assert await repository.total_document_count() == 1


async def test_upsert_for_unknown_user(db, repository):
    assert await repository.upsert_document("ghost", make_progress("doc")) is False


async def test_document_round_trip_is_exact(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))
    expected = make_progress("doc", "0.33333333333333333333333333333")

    await repository.upsert_document("alice", expected)

    assert await repository.get_document("alice", "doc") == expected
    user = await repository.get_user_by_username("alice")
    assert user.documents == {"doc": expected}


async def test_update_account_changes_only_given_columns(db, repository):
    await repository.create_user(
        UserAccount(username="alice", password_hash="h", documents={"a": make_progress("a")})
    )

    assert await repository.update_account("alice", is_active=False)
    assert await repository.update_account("alice", password_hash="h2")

    stored = await repository.get_user_by_username("alice")
    assert stored.is_active is False
    assert stored.is_administrator is False
    assert stored.password_hash == "h2"
    assert list(stored.documents) == ["a"]


async def test_update_account_for_unknown_user(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))

    assert await repository.update_account("ghost", is_active=False) is False
    assert await repository.update_account("ghost") is False
    assert await repository.update_account("alice") is True


async def test_delete_user_removes_documents(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))
    await repository.create_user(UserAccount(username="bob", password_hash="h"))
    await repository.upsert_document("alice", make_progress("a"))
    await repository.upsert_document("bob", make_progress("a"))

    assert await repository.delete_user("alice")
    assert await repository.delete_user("alice") is False

    assert await repository.total_document_count() == 1
    assert await repository.get_document("bob", "a") is not None


async def test_remove_and_list_documents(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))
    await repository.upsert_document("alice", make_progress("b"))
    await repository.upsert_document("alice", make_progress("a"))

    assert [d.document_hash for d in await repository.list_documents("alice")] == ["a", "b"]
    assert await repository.remove_document("alice", "a")
    assert await repository.remove_document("alice", "a") is False
    assert [d.document_hash for d in await repository.list_documents("alice")] == ["b"]


async def test_list_users_includes_documents(db, repository):
    await repository.create_user(UserAccount(username="alice", password_hash="h"))
    await repository.create_user(UserAccount(username="bob", password_hash="h"))
    await repository.upsert_document("bob", make_progress("x"))

    users = {u.username: u for u in await repository.list_users()}
    assert set(users) == {"alice", "bob"}
    assert len(users["bob"].documents) == 1
