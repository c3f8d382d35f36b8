"""
Pydantic schemas for the KOReader sync endpoints.
Field names follow the wire format of the KOReader sync plugin.
"""
from decimal import Decimal

from pydantic import BaseModel, Field

# Widest value the documents table accepts for hashes and device fields
MAX_FIELD_LENGTH = 255


class ProgressIn(BaseModel):
    """
    Body of PUT /syncs/progress.
    Every field is stored as sent; only lengths are checked.
    """
    document: str = Field(max_length=MAX_FIELD_LENGTH)  # Document hash
    progress: str         # Position marker (xpointer or page number, client-defined)
    percentage: Decimal   # Completion ratio, kept exact
    device: str = Field(max_length=MAX_FIELD_LENGTH)
    device_id: str = Field(max_length=MAX_FIELD_LENGTH)


class ProgressUpdateOut(BaseModel):
    document: str
    timestamp: int  # Unix seconds


class ProgressOut(BaseModel):
    device: str
    device_id: str
    document: str
    percentage: Decimal  # Written as a JSON number by DecimalJSONResponse
    progress: str
    timestamp: int  # Unix seconds
