"""Notification API routes."""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventdesk.database import get_db
from eventdesk.dependencies import CurrentPrincipal
from eventdesk.schemas.notification import MarkAllReadResult, NotificationOut, UnreadCount
from eventdesk.services import notification_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/my-notifications", response_model=list[NotificationOut])
def list_my_notifications(
    principal: CurrentPrincipal,
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    """The caller's notifications, newest first."""
    return notification_service.list_notifications(db, principal, unread_only)


@router.get("/my-notifications/unread-count", response_model=UnreadCount, response_model_by_alias=True)
def unread_count(principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Number of unread notifications, for the header badge."""
    return UnreadCount(unread_count=notification_service.count_unread(db, principal))


# Registered before /notifications/{notification_id} so the literal path wins.
@router.patch("/notifications/mark-all-read", response_model=MarkAllReadResult)
def mark_all_read(principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Mark every notification of the caller as read."""
    return MarkAllReadResult(updated=notification_service.mark_all_read(db, principal))


@router.patch("/notifications/{notification_id}", response_model=NotificationOut)
def mark_read(notification_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Mark one notification as read."""
    return notification_service.mark_read(db, principal, notification_id)
