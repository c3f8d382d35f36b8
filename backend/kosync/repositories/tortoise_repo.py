"""
Tortoise ORM implementation of the repository contract.

Accounts live in the users table and progress in the documents table
(one row per user and document hash). ORM rows are converted to the
pydantic values from base.py before they leave this module.
"""
import datetime as dt
import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from kosync.models.document import Document
from kosync.models.user import User
from .base import DuplicateKeyError, KosyncRepository, Progress, UserAccount

logger = logging.getLogger(__name__)


def _as_utc(value: dt.datetime) -> dt.datetime:
    # Some backends hand back naive datetimes; they are always stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def _progress_from_row(row: Document) -> Progress:
    return Progress(
        document_hash=row.document_hash,
        progress=row.progress,
        percentage=Decimal(row.percentage),
        device=row.device,
        device_id=row.device_id,
        timestamp=_as_utc(row.timestamp),
    )


def _document_fields(document: Progress) -> dict:
    return {
        "progress": document.progress,
        "percentage": str(document.percentage),
        "device": document.device,
        "device_id": document.device_id,
        "timestamp": _as_utc(document.timestamp),
    }


def _account_from_row(row: User) -> UserAccount:
    documents = {d.document_hash: _progress_from_row(d) for d in row.documents}
    return UserAccount(
        id=str(row.id),
        username=row.username,
        password_hash=row.password_hash,
        is_active=row.is_active,
        is_administrator=row.is_administrator,
        documents=documents,
    )


class TortoiseKosyncRepository(KosyncRepository):
    """Relational storage through Tortoise ORM"""

    async def get_user_by_username(self, username: str) -> Optional[UserAccount]:
        row = await User.filter(username=username).prefetch_related("documents").first()
        return _account_from_row(row) if row else None

    async def get_user_by_id(self, user_id: str) -> Optional[UserAccount]:
        try:
            pk = uuid.UUID(str(user_id))
        except ValueError:
            return None
        row = await User.filter(id=pk).prefetch_related("documents").first()
        return _account_from_row(row) if row else None

    async def list_users(self) -> List[UserAccount]:
        rows = await User.all().order_by("created_at").prefetch_related("documents")
        return [_account_from_row(r) for r in rows]

    async def create_user(self, user: UserAccount) -> UserAccount:
        try:
            async with in_transaction():
                row = await User.create(
                    username=user.username,
                    password_hash=user.password_hash,
                    is_active=user.is_active,
                    is_administrator=user.is_administrator,
                )
                for document in user.documents.values():
                    await Document.create(
                        user=row,
                        document_hash=document.document_hash,
                        **_document_fields(document),
                    )
        except IntegrityError as exc:
            raise DuplicateKeyError(user.username) from exc
        return user.model_copy(update={"id": str(row.id)})

    async def update_account(
        self,
        username: str,
        *,
        password_hash: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_administrator: Optional[bool] = None,
    ) -> bool:
        changes = {
            name: value
            for name, value in (
                ("password_hash", password_hash),
                ("is_active", is_active),
                ("is_administrator", is_administrator),
            )
            if value is not None
        }
        query = User.filter(username=username)
        if not changes:
            return await query.exists()
        # Single UPDATE on the users table; concurrent progress writes are unaffected
        return await query.update(**changes) > 0

    async def delete_user(self, username: str) -> bool:
        async with in_transaction():
            row = await User.get_or_none(username=username)
            if row is None:
                return False
            await Document.filter(user=row).delete()
            await row.delete()
        return True

    async def get_document(self, username: str, document_hash: str) -> Optional[Progress]:
        row = await Document.get_or_none(user__username=username, document_hash=document_hash)
        return _progress_from_row(row) if row else None

    async def upsert_document(self, username: str, document: Progress) -> bool:
        owner = await User.get_or_none(username=username)
        if owner is None:
            return False
        await Document.update_or_create(
            defaults=_document_fields(document),
            user=owner,
            document_hash=document.document_hash,
        )
        return True

    async def remove_document(self, username: str, document_hash: str) -> bool:
        row = await Document.get_or_none(user__username=username, document_hash=document_hash)
        if row is None:
            return False
        await row.delete()
        return True

    async def list_documents(self, username: str) -> List[Progress]:
        rows = await Document.filter(user__username=username).order_by("document_hash")
        return [_progress_from_row(r) for r in rows]

    async def total_document_count(self) -> int:
        return await Document.all().count()
