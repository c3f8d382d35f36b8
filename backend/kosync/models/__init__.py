# kosync/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Sync account and credentials
- Document: Per-user reading progress of one document
"""
from .user import User
from .document import Document
