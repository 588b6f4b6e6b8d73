"""Per-event discussion threads."""
import logging

from sqlalchemy.orm import Session, joinedload

from eventdesk.dependencies import Principal
from eventdesk.errors import Forbidden, ValidationError
from eventdesk.models.comment import Comment
from eventdesk.policy import Action
from eventdesk.services import event_service

logger = logging.getLogger(__name__)


def _require_participant(db: Session, principal: Principal, event_id: str):
    event = event_service.get_event(db, event_id)
    if not event_service.is_participant(db, principal, event):
        raise Forbidden("Only invitees, the organizer, or an admin can access this discussion")
    return event


def post_comment(db: Session, principal: Principal, event_id: str, text: str) -> Comment:
    """Append a comment; caller must be invited, own the event, or be admin."""
    _require_participant(db, principal, event_id)
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment text cannot be empty")

    comment = Comment(event_id=event_id, author_id=principal.user_id, text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s posted on event %s by %s", comment.comment_id, event_id, principal.user_id)
    return comment


def list_comments(db: Session, principal: Principal, event_id: str) -> list[Comment]:
    """Comments oldest first."""
    _require_participant(db, principal, event_id)
    return (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.event_id == event_id)
        .order_by(Comment.seq)
        .all()
    )


def delete_discussion(db: Session, principal: Principal, event_id: str) -> int:
    """Remove every comment of the event in a single statement."""
    event = event_service.get_event(db, event_id)
    event_service.check_permission(principal, Action.delete_discussion, event.organizer_id)
    deleted = (
        db.query(Comment)
        .filter(Comment.event_id == event_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Deleted %d comments from event %s", deleted, event_id)
    return deleted
