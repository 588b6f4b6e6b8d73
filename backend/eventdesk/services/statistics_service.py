"""Admin read-aggregates over users and events."""
import logging
from datetime import datetime, timezone

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from eventdesk.config import settings
from eventdesk.models.event import Event
from eventdesk.models.user import Role, User

logger = logging.getLogger(__name__)


def _event_start(event_date, event_time: str, tz) -> datetime:
    """Combine the stored date and HH:MM time in the event timezone."""
    hour, minute = (int(part) for part in event_time.split(":", 1))
    naive = datetime(event_date.year, event_date.month, event_date.day, hour, minute)
    return tz.localize(naive)


def get_statistics(db: Session, now: datetime | None = None) -> dict:
    """Totals, users by role, upcoming vs. past events, daily registrations."""
    now = now or datetime.now(timezone.utc)
    tz = pytz.timezone(settings.EVENT_TIMEZONE)

    total_users = db.query(func.count(User.user_id)).scalar()
    total_events = db.query(func.count(Event.event_id)).scalar()

    users_by_role = {role.value: 0 for role in Role}
    for role, count in db.query(User.role, func.count(User.user_id)).group_by(User.role).all():
        users_by_role[role.value] = count

    events_by_organizers = (
        db.query(func.count(Event.event_id))
        .join(User, Event.organizer_id == User.user_id)
        .filter(User.role == Role.organizer)
        .scalar()
    )

    upcoming = past = 0
    for event_date, event_time in db.query(Event.date, Event.time).all():
        if _event_start(event_date, event_time, tz) >= now:
            upcoming += 1
        else:
            past += 1

    day = func.date(User.created_at)
    new_users = [
        {"date": str(d), "count": count}
        for d, count in db.query(day, func.count(User.user_id)).group_by(day).order_by(day).all()
    ]

    logger.info("Computed statistics: %d users, %d events", total_users, total_events)
    return {
        "total_users": total_users,
        "total_events": total_events,
        "users_by_role": users_by_role,
        "events_by_organizers": events_by_organizers,
        "upcoming_events": upcoming,
        "past_events": past,
        "new_users_over_time": new_users,
    }
