from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationType(str, Enum):
    match = "match"
    message = "message"
    invitation = "invitation"
    summary = "summary"
    system = "system"


class Notification(BaseModel):
    id: str
    type: NotificationType
    message: str
    body: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    read: bool = False
    data: dict[str, Any] = Field(default_factory=dict)
    # True until the server has issued an id for this entry
    local: bool = False


class NotificationCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    type: NotificationType
    message: str = Field(..., min_length=1)
    body: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


@dataclass
class ReconcileResult:
    merged: list[Notification]
    to_surface: list[Notification]
    new_ids: list[str] = field(default_factory=list)
