"""Pydantic schemas for Notifications."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class NotificationOut(BaseModel):
    notification_id: str
    user_id: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotifyRequest(BaseModel):
    message: str


class NotifyResult(BaseModel):
    event_id: str
    notified: int


class MarkAllReadResult(BaseModel):
    updated: int


class UnreadCount(BaseModel):
    unread_count: int = Field(serialization_alias="unreadCount")
