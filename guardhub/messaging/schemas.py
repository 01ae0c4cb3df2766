"""
messaging/schemas.py

Schemas for direct company chat.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from guardhub.database.enums import UserRole


class ChatContact(BaseModel):
    id: UUID
    full_name: str
    role: UserRole
    unread_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class ChatMessageCreate(BaseModel):
    recipient_id: UUID
    message: str = Field(..., min_length=1, max_length=4000)


class ChatMessageRead(BaseModel):
    id: UUID
    company_id: UUID | None = None
    sender_id: UUID
    sender_name: str | None = None
    recipient_id: UUID
    message: str
    is_read: bool
    created_at: datetime


class ChatEvent(BaseModel):
    event: str = "chat_message"
    message: ChatMessageRead


class MarkReadResponse(BaseModel):
    updated: int
