"""Core event service — ownership checks, scoped listing, cascading delete.

Responsibilities:
- Authorization hook: every write goes through ``policy.can_perform``
- Image upload before insert: a failed upload leaves no event row
- Scope resolution for listings (all / mine / public)
- Visibility of private events (owner, admin, invitees)
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventdesk.dependencies import Principal
from eventdesk.errors import Forbidden, NotFound, ValidationError
from eventdesk.models.event import Event
from eventdesk.models.invitation import Invitation
from eventdesk.models.user import User
from eventdesk.policy import Action, can_perform
from eventdesk.services.image_storage import ImageStorage, validate_image

logger = logging.getLogger(__name__)

SCOPES = ("all", "mine", "public")
REQUIRED_FIELDS = ("name", "time", "location")
UPDATABLE_FIELDS = ("name", "date", "time", "location", "description", "is_public")


def check_permission(principal: Principal, action: Action, owner_id: Optional[str] = None) -> None:
    """Raise Forbidden unless the policy allows ``action`` for the caller."""
    if not can_perform(principal.role, action, owner_id, principal.user_id):
        raise Forbidden(f"Not allowed to {action.value.replace('_', ' ')}")


def get_event(db: Session, event_id: str) -> Event:
    """Fetch an event or raise NotFound."""
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


def is_invited(db: Session, event_id: str, user_id: str) -> bool:
    return (
        db.query(Invitation.invitation_id)
        .filter(Invitation.event_id == event_id, Invitation.user_id == user_id)
        .first()
        is not None
    )


def is_participant(db: Session, principal: Principal, event: Event) -> bool:
    """Owner, admin, or invitee."""
    if principal.is_admin or event.organizer_id == principal.user_id:
        return True
    return is_invited(db, event.event_id, principal.user_id)


def get_visible_event(db: Session, principal: Principal, event_id: str) -> Event:
    """Fetch an event the caller may see; private events need participation."""
    event = get_event(db, event_id)
    if not event.is_public and not is_participant(db, principal, event):
        raise Forbidden("This event is private")
    return event


def _require_text(fields: dict[str, Any], names) -> None:
    missing = [n for n in names if n in fields and not str(fields[n] or "").strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def create_event(
    db: Session,
    principal: Principal,
    fields: dict[str, Any],
    storage: Optional[ImageStorage] = None,
    image: Optional[tuple[str, str, bytes]] = None,
) -> Event:
    """Create an event owned by the caller.

    ``image`` is ``(filename, content_type, data)``. The upload runs first so
    a storage failure aborts the create without writing anything.

    The owner's stored role is checked as well as the token's, so a user
    demoted after login cannot keep creating events.
    """
    check_permission(principal, Action.create_event)
    owner = db.query(User).filter(User.user_id == principal.user_id).first()
    if owner is None:
        raise Forbidden("Account no longer exists")
    if not can_perform(owner.role, Action.create_event):
        logger.warning("User %s tried to create an event as %s", owner.user_id, owner.role.value)
        raise Forbidden(f"Not allowed to {Action.create_event.value.replace('_', ' ')}")

    missing = [n for n in REQUIRED_FIELDS + ("date",) if fields.get(n) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    _require_text(fields, REQUIRED_FIELDS)

    image_url = None
    if image is not None:
        filename, content_type, data = image
        validate_image(content_type, data)
        if storage is None:
            raise ValidationError("Image uploads are not configured")
        image_url = storage.save(filename, content_type, data)

    event = Event(
        name=fields["name"].strip(),
        date=fields["date"],
        time=fields["time"],
        location=fields["location"].strip(),
        description=fields.get("description"),
        is_public=fields.get("is_public", True),
        image_url=image_url,
        organizer_id=owner.user_id,
    )
    db.add(event)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        if image_url is not None:
            storage.delete(image_url)
        raise
    db.refresh(event)
    logger.info("Created event '%s' (%s) by %s", event.name, event.event_id, principal.user_id)
    return event


def default_scope(principal: Principal) -> str:
    if principal.is_admin:
        return "all"
    if can_perform(principal.role, Action.create_event):
        return "mine"
    return "public"


def list_events(db: Session, principal: Principal, scope: Optional[str] = None) -> list[Event]:
    """List events for a scope: all (admin), mine (own events), public (anyone)."""
    scope = scope or default_scope(principal)
    if scope not in SCOPES:
        raise ValidationError(f"Invalid scope: {scope}. Expected one of {', '.join(SCOPES)}")

    query = db.query(Event)
    if scope == "all":
        check_permission(principal, Action.list_all_events)
    elif scope == "mine":
        check_permission(principal, Action.create_event)
        query = query.filter(Event.organizer_id == principal.user_id)
    else:
        query = query.filter(Event.is_public.is_(True))
    return query.order_by(Event.date, Event.time, Event.created_at).all()


def update_event(
    db: Session,
    principal: Principal,
    event_id: str,
    updates: dict[str, Any],
) -> Event:
    """Partial update; owner or admin only."""
    event = get_event(db, event_id)
    check_permission(principal, Action.edit_event, event.organizer_id)

    updates = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
    for name in ("date", "time", "is_public"):
        if name in updates and updates[name] is None:
            raise ValidationError(f"{name} cannot be null")
    _require_text(updates, REQUIRED_FIELDS)

    for field, value in updates.items():
        if isinstance(value, str) and field in REQUIRED_FIELDS:
            value = value.strip()
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s fields %s", event_id, sorted(updates))
    return event


def delete_event(db: Session, principal: Principal, event_id: str) -> None:
    """Delete an event with its invitations and comments in one transaction."""
    event = get_event(db, event_id)
    check_permission(principal, Action.delete_event, event.organizer_id)
    invitations, comments = len(event.invitations), len(event.comments)
    db.delete(event)
    db.commit()
    logger.info(
        "Deleted event %s (cascaded %d invitations, %d comments)",
        event_id, invitations, comments,
    )
