"""
Repository Abstract Interface

Storage contract for accounts and their reading progress. Services only
depend on this interface; the backing engine can be swapped without them
noticing. Only point lookups by username and by (username, document_hash)
are assumed.
"""
import datetime as dt
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Progress(BaseModel):
    """Reading position snapshot for one (user, document) pair"""
    document_hash: str
    progress: str
    percentage: Decimal
    device: str
    device_id: str
    timestamp: dt.datetime  # UTC, stamped by the server

    @property
    def epoch_seconds(self) -> int:
        """Timestamp as Unix seconds (wire format)"""
        ts = self.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=dt.timezone.utc)
        return int(ts.timestamp())


class UserAccount(BaseModel):
    """
    One account with its documents

    Note: documents is keyed by document_hash; every key equals the
    document_hash of its value.
    """
    id: Optional[str] = None  # Assigned by the store on creation
    username: str
    password_hash: str
    is_active: bool = True
    is_administrator: bool = False
    documents: Dict[str, Progress] = Field(default_factory=dict)


class DuplicateKeyError(Exception):
    """Raised by create_user when the username is already taken"""


class KosyncRepository(ABC):
    """Repository Abstract Base Class"""

    # User operations
    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def list_users(self) -> List[UserAccount]:
        pass

    @abstractmethod
    async def create_user(self, user: UserAccount) -> UserAccount:
        """
        Persist a new account

        Returns:
        - UserAccount: the stored account with its id

        Raises:
        - DuplicateKeyError: username already exists
        """
        pass

    @abstractmethod
    async def update_account(
        self,
        username: str,
        *,
        password_hash: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_administrator: Optional[bool] = None,
    ) -> bool:
        """
        Change the given account columns only; documents are never touched.
        Arguments left as None keep their stored value. False if absent.
        """
        pass

    @abstractmethod
    async def delete_user(self, username: str) -> bool:
        """Delete the account and all of its documents; False if absent"""
        pass

    # Document operations
    @abstractmethod
    async def get_document(self, username: str, document_hash: str) -> Optional[Progress]:
        pass

    @abstractmethod
    async def upsert_document(self, username: str, document: Progress) -> bool:
        """Insert or fully replace one document; False if the user is absent"""
        pass

    @abstractmethod
    async def remove_document(self, username: str, document_hash: str) -> bool:
        pass

    @abstractmethod
    async def list_documents(self, username: str) -> List[Progress]:
        pass

    @abstractmethod
    async def total_document_count(self) -> int:
        pass
