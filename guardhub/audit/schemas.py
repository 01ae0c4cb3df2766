"""
audit/schemas.py

Read schema for audit log entries.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from guardhub.database.enums import AuditAction


class AuditLogRead(BaseModel):
    id: UUID
    user_id: UUID | None = None
    user_name: str | None = Field(None, description="Full name of the acting profile")
    action: AuditAction
    entity_type: str
    entity_id: UUID | None = None
    changes: dict[str, Any] | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
