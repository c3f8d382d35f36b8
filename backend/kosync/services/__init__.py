"""
Services Module

Business logic on top of the repository:
- SyncService: reading progress read/update (last-writer-wins)
- UserService: account lifecycle and administrator rules
"""
from .sync import SyncService, utc_now
from .users import RESERVED_ADMIN, UserService, UserSummary

__all__ = [
    "SyncService",
    "utc_now",
    "RESERVED_ADMIN",
    "UserService",
    "UserSummary",
]
