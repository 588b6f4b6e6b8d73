"""Discussion API routes, nested under an event."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventdesk.database import get_db
from eventdesk.dependencies import CurrentPrincipal
from eventdesk.models.comment import Comment
from eventdesk.schemas.discussion import CommentCreate, CommentOut, DiscussionDeleted
from eventdesk.services import discussion_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_out(comment: Comment) -> CommentOut:
    return CommentOut(
        comment_id=comment.comment_id,
        event_id=comment.event_id,
        author_id=comment.author_id,
        author_username=comment.author.username if comment.author else None,
        text=comment.text,
        created_at=comment.created_at,
    )


@router.get("/{event_id}/discussions", response_model=list[CommentOut])
def list_comments(event_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Comments on the event, oldest first."""
    return [_to_out(c) for c in discussion_service.list_comments(db, principal, event_id)]


@router.post("/{event_id}/discussions", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def post_comment(
    event_id: str,
    payload: CommentCreate,
    principal: CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Post a comment (invitees, the organizer, or an admin)."""
    return _to_out(discussion_service.post_comment(db, principal, event_id, payload.text))


@router.delete("/{event_id}/discussions", response_model=DiscussionDeleted)
def delete_discussion(event_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Delete every comment on the event (owner or admin)."""
    deleted = discussion_service.delete_discussion(db, principal, event_id)
    return DiscussionDeleted(event_id=event_id, deleted=deleted)
