# kosync/models/document.py
import uuid
from tortoise import fields, models

class Document(models.Model):
    """
    Last reported reading position of one document for one user.

    A row is replaced wholesale on every progress update; there is at most
    one row per (user, document_hash).
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="documents",
        on_delete=fields.CASCADE,
    )
    document_hash = fields.CharField(max_length=255)  # Client-chosen identifier, not interpreted
    progress = fields.TextField()                     # Opaque position marker (e.g. an xpointer)
    percentage = fields.TextField()                   # Exact decimal text, avoids float rounding
    device = fields.CharField(max_length=255)
    device_id = fields.CharField(max_length=255)
    timestamp = fields.DatetimeField()                # Server time (UTC) of the last update

    class Meta:
        table = "documents"
        unique_together = (("user", "document_hash"),)
