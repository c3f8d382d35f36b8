# kosync/models/user.py
"""
Database model for users.
Represents one sync account: credentials, activation state and the
administrator flag. Reading progress lives in the documents table.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Documents (one-to-many, via related_name="documents"),
      removed together with the user (ON DELETE CASCADE)

    Security:
    - password_hash holds an argon2 hash of the client key, never the key itself
    - Username must be unique across all users (case-sensitive)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    username = fields.CharField(
        max_length=256,
        unique=True,
        index=True
    )  # Login name sent in the x-auth-user header
    password_hash = fields.CharField(max_length=255)
    is_active = fields.BooleanField(default=True, index=True)  # Inactive accounts cannot authenticate
    is_administrator = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
