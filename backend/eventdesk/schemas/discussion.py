"""Pydantic schemas for discussion comments."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CommentCreate(BaseModel):
    text: str


class CommentOut(BaseModel):
    comment_id: str
    event_id: str
    author_id: str
    author_username: Optional[str] = None
    text: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DiscussionDeleted(BaseModel):
    event_id: str
    deleted: int
