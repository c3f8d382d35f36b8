"""
Pydantic schemas for account endpoints (KOReader registration and the
administrative /manage surface).
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# Widest username the users table accepts
MAX_USERNAME_LENGTH = 256


class UserCreateIn(BaseModel):
    """
    Request model for account creation.
    On /users/create the password is the client key KOReader derives;
    on /manage/users it is the plaintext password.
    """
    username: str = Field(max_length=MAX_USERNAME_LENGTH)
    password: str


class PasswordChangeIn(BaseModel):
    password: str


class UserOut(BaseModel):
    username: str


class UserSummaryOut(BaseModel):
    """
    Account as listed to administrators.
    Never includes the password hash.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    username: str
    is_active: bool = Field(serialization_alias="isActive")
    is_administrator: bool = Field(serialization_alias="isAdministrator")
    document_count: int = Field(serialization_alias="documentCount")


class DocumentOut(BaseModel):
    """Stored progress as shown to administrators."""
    document_hash: str = Field(serialization_alias="documentHash")
    progress: str
    percentage: Decimal
    device: str
    device_id: str = Field(serialization_alias="deviceId")
    timestamp: int  # Unix seconds


class MessageOut(BaseModel):
    message: str
