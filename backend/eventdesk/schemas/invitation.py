"""Pydantic schemas for Invitations."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from eventdesk.schemas.event import EventSummary


class InviteRequest(BaseModel):
    user_id: str


class RespondRequest(BaseModel):
    response: str  # yes | no


class InvitationOut(BaseModel):
    invitation_id: str
    event_id: str
    user_id: str
    response: Optional[str] = None
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MyInvitationOut(InvitationOut):
    event: EventSummary
