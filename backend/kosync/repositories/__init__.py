"""
Repositories Module

Storage contract for accounts and reading progress, and its Tortoise ORM
implementation.
"""
from .base import (
    DuplicateKeyError,
    KosyncRepository,
    Progress,
    UserAccount,
)
from .tortoise_repo import TortoiseKosyncRepository

__all__ = [
    "DuplicateKeyError",
    "KosyncRepository",
    "Progress",
    "UserAccount",
    "TortoiseKosyncRepository",
]
