"""Notifications — system messages and organizer broadcasts."""
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventdesk.dependencies import Principal
from eventdesk.errors import Forbidden, NotFound, ValidationError
from eventdesk.models.invitation import Invitation
from eventdesk.models.notification import Notification
from eventdesk.policy import Action
from eventdesk.services import event_service

logger = logging.getLogger(__name__)


def add_notification(db: Session, user_id: str, message: str) -> Notification:
    """Stage a notification on the session; the caller commits."""
    notification = Notification(user_id=user_id, message=message, is_read=False)
    db.add(notification)
    return notification


def list_notifications(db: Session, principal: Principal, unread_only: bool = False) -> list[Notification]:
    query = db.query(Notification).filter(Notification.user_id == principal.user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc()).all()


def count_unread(db: Session, principal: Principal) -> int:
    return (
        db.query(func.count(Notification.notification_id))
        .filter(Notification.user_id == principal.user_id, Notification.is_read.is_(False))
        .scalar()
    )


def mark_read(db: Session, principal: Principal, notification_id: str) -> Notification:
    """Mark one of the caller's notifications as read (idempotent)."""
    notification = (
        db.query(Notification)
        .filter(Notification.notification_id == notification_id)
        .first()
    )
    if not notification:
        raise NotFound("Notification not found")
    if notification.user_id != principal.user_id:
        raise Forbidden("This notification belongs to another user")
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        logger.info("Notification %s marked read by %s", notification_id, principal.user_id)
    return notification


def mark_all_read(db: Session, principal: Principal) -> int:
    """Mark every unread notification of the caller as read; returns the count."""
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == principal.user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    logger.info("Marked %d notifications read for %s", updated, principal.user_id)
    return updated


def notify_attendees(db: Session, principal: Principal, event_id: str, message: str) -> int:
    """Send ``message`` to every user invited to the event; returns the count."""
    event = event_service.get_event(db, event_id)
    event_service.check_permission(principal, Action.notify_attendees, event.organizer_id)
    message = (message or "").strip()
    if not message:
        raise ValidationError("Message cannot be empty")

    invitee_ids = [
        row.user_id
        for row in db.query(Invitation.user_id).filter(Invitation.event_id == event_id).all()
    ]
    for user_id in invitee_ids:
        add_notification(db, user_id, f"[{event.name}] {message}")
    db.commit()
    logger.info("Event %s: notified %d attendees", event_id, len(invitee_ids))
    return len(invitee_ids)
