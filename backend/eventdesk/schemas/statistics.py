"""Pydantic schemas for admin statistics."""
from pydantic import BaseModel, Field


class DailyCount(BaseModel):
    date: str  # YYYY-MM-DD
    count: int


class StatisticsOut(BaseModel):
    total_users: int = Field(serialization_alias="totalUsers")
    total_events: int = Field(serialization_alias="totalEvents")
    users_by_role: dict[str, int] = Field(serialization_alias="usersByRole")
    # Events owned by users whose current role is organizer.
    events_by_organizers: int = Field(serialization_alias="eventsByOrganizers")
    upcoming_events: int = Field(serialization_alias="upcomingEvents")
    past_events: int = Field(serialization_alias="pastEvents")
    new_users_over_time: list[DailyCount] = Field(serialization_alias="newUsersOverTime")
