"""
Note Schemas

Request/response models for note operations. Responses use the camelCase
field names (and `_id`) the web client reads.
"""
from pydantic import BaseModel, Field, field_serializer
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime, timezone


class NoteCreate(BaseModel):
    """Schema for creating a note."""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class NoteUpdate(BaseModel):
    """Schema for updating a note. Omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)


class NoteResponse(BaseModel):
    """Note response schema."""
    id: str = Field(..., alias="_id")
    title: str
    content: str
    user_id: str
    tenant_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

    @field_serializer("created_at", "updated_at")
    def serialize_utc(self, value: datetime) -> str:
        # Columns hold naive UTC; send an explicit Z so clients don't read local time
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
