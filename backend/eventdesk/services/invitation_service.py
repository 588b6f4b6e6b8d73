"""Invitations and attendee responses.

An invitation starts with ``response = None``; the invitee answers once with
``yes`` or ``no`` and that first answer is final.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from eventdesk.dependencies import Principal
from eventdesk.errors import Duplicate, Forbidden, InvalidState, NotFound, ValidationError
from eventdesk.models.event import Event
from eventdesk.models.invitation import Invitation, InvitationResponse
from eventdesk.models.user import User
from eventdesk.policy import Action
from eventdesk.services import event_service
from eventdesk.services.notification_service import add_notification

logger = logging.getLogger(__name__)


def _create(db: Session, event: Event, user_id: str) -> Invitation:
    existing = (
        db.query(Invitation)
        .filter(Invitation.event_id == event.event_id, Invitation.user_id == user_id)
        .first()
    )
    if existing:
        raise Duplicate("User is already invited to this event")

    invitation = Invitation(event_id=event.event_id, user_id=user_id, response=None)
    db.add(invitation)
    return invitation


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        # Concurrent invite for the same pair hit the unique constraint.
        db.rollback()
        raise Duplicate("User is already invited to this event")


def invite(db: Session, principal: Principal, event_id: str, user_id: str) -> Invitation:
    """Invite a user to an event the caller owns (or any event, for admins)."""
    event = event_service.get_event(db, event_id)
    event_service.check_permission(principal, Action.invite, event.organizer_id)
    invitee = db.query(User).filter(User.user_id == user_id).first()
    if not invitee:
        raise NotFound("User not found")

    invitation = _create(db, event, user_id)
    add_notification(db, user_id, f"You have been invited to '{event.name}' on {event.date} at {event.time}.")
    _commit(db)
    db.refresh(invitation)
    logger.info("Invited user %s to event %s (invitation %s)", user_id, event_id, invitation.invitation_id)
    return invitation


def register_interest(db: Session, principal: Principal, event_id: str) -> Invitation:
    """Let a user add themselves to a public event."""
    event = event_service.get_event(db, event_id)
    if not event.is_public:
        raise Forbidden("Private events are invitation-only")

    invitation = _create(db, event, principal.user_id)
    if event.organizer_id != principal.user_id:
        add_notification(db, event.organizer_id, f"{principal.username} joined '{event.name}'.")
    _commit(db)
    db.refresh(invitation)
    logger.info("User %s registered interest in event %s", principal.user_id, event_id)
    return invitation


def respond(db: Session, principal: Principal, invitation_id: str, response: str) -> Invitation:
    """Record the invitee's yes/no answer. The first answer is final."""
    try:
        answer = InvitationResponse((response or "").strip().lower())
    except ValueError:
        raise ValidationError("Response must be 'yes' or 'no'")

    invitation = db.query(Invitation).filter(Invitation.invitation_id == invitation_id).first()
    if not invitation:
        raise NotFound("Invitation not found")
    if invitation.user_id != principal.user_id:
        raise Forbidden("This invitation belongs to another user")
    if invitation.response is not None:
        raise InvalidState(f"Invitation already answered '{invitation.response.value}'")

    invitation.response = answer
    invitation.responded_at = datetime.now(timezone.utc)
    event = invitation.event
    add_notification(
        db,
        event.organizer_id,
        f"{principal.username} answered '{answer.value}' to '{event.name}'.",
    )
    db.commit()
    db.refresh(invitation)
    logger.info("User %s answered '%s' to invitation %s", principal.user_id, answer.value, invitation_id)
    return invitation


def list_my_invitations(db: Session, principal: Principal) -> list[Invitation]:
    """The caller's invitations, each with its event loaded."""
    return (
        db.query(Invitation)
        .options(joinedload(Invitation.event))
        .join(Event)
        .filter(Invitation.user_id == principal.user_id)
        .order_by(Event.date, Event.time)
        .all()
    )


def list_event_invitations(db: Session, principal: Principal, event_id: str) -> list[Invitation]:
    """All invitations for an event; owner or admin only."""
    event = event_service.get_event(db, event_id)
    event_service.check_permission(principal, Action.view_invitations, event.organizer_id)
    return (
        db.query(Invitation)
        .filter(Invitation.event_id == event_id)
        .order_by(Invitation.created_at)
        .all()
    )
