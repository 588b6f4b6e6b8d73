"""Pydantic schemas for Events."""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field


TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class EventCreate(BaseModel):
    name: str
    date: dt.date
    time: str = Field(pattern=TIME_PATTERN)
    location: str
    description: Optional[str] = None
    is_public: bool = True


class EventUpdate(BaseModel):
    name: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    location: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None


class EventOut(BaseModel):
    event_id: str
    name: str
    date: dt.date
    time: str
    location: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_public: bool
    organizer_id: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class EventSummary(BaseModel):
    event_id: str
    name: str
    date: dt.date
    time: str
    location: str
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}
