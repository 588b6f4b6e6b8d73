"""Event API routes — delegates to event_service for ownership enforcement."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from eventdesk.database import get_db
from eventdesk.dependencies import CurrentPrincipal, OrganizerPrincipal
from eventdesk.config import settings
from eventdesk.errors import ValidationError, format_validation_errors
from eventdesk.schemas.event import EventCreate, EventOut, EventUpdate
from eventdesk.schemas.invitation import InvitationOut, InviteRequest
from eventdesk.schemas.notification import NotifyRequest, NotifyResult
from eventdesk.services import event_service, invitation_service, notification_service
from eventdesk.services.image_storage import ImageStorage, get_image_storage

logger = logging.getLogger(__name__)
router = APIRouter()


async def parse_event_submission(request: Request) -> tuple[EventCreate, Optional[tuple[str, str, bytes]]]:
    """Read an event from a JSON body or a multipart form with an optional ``image`` file."""
    image = None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        data = {k: v for k, v in form.items() if k != "image" and isinstance(v, str)}
        upload = form.get("image")
        if upload is not None and not isinstance(upload, str) and upload.filename:
            # One byte past the limit is enough for validate_image to reject it.
            content = await upload.read(settings.MAX_IMAGE_BYTES + 1)
            image = (upload.filename, upload.content_type, content)
    else:
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Request body must be JSON or multipart form data")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

    try:
        return EventCreate.model_validate(data), image
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors()))


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    principal: OrganizerPrincipal,
    submission: tuple = Depends(parse_event_submission),
    storage: ImageStorage = Depends(get_image_storage),
    db: Session = Depends(get_db),
):
    """Create an event (JSON, or multipart with an ``image`` file)."""
    payload, image = submission
    return event_service.create_event(
        db=db,
        principal=principal,
        fields=payload.model_dump(),
        storage=storage,
        image=image,
    )


@router.get("", response_model=list[EventOut])
def list_events(
    principal: CurrentPrincipal,
    scope: Optional[str] = Query(None, description="all (admin), mine, or public"),
    db: Session = Depends(get_db),
):
    """List events for the requested scope; defaults by role."""
    return event_service.list_events(db, principal, scope)


@router.get("/my-events", response_model=list[EventOut])
def list_my_events(principal: OrganizerPrincipal, db: Session = Depends(get_db)):
    """Events owned by the caller."""
    return event_service.list_events(db, principal, "mine")


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Fetch a single event."""
    return event_service.get_visible_event(db, principal, event_id)


@router.api_route("/{event_id}", methods=["PUT", "PATCH"], response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    principal: CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Partially update an event (owner or admin)."""
    return event_service.update_event(
        db=db,
        principal=principal,
        event_id=event_id,
        updates=payload.model_dump(exclude_unset=True),
    )


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Delete an event and everything attached to it (owner or admin)."""
    event_service.delete_event(db, principal, event_id)


@router.post("/{event_id}/invitations", response_model=InvitationOut, status_code=status.HTTP_201_CREATED)
def invite_user(
    event_id: str,
    payload: InviteRequest,
    principal: CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Invite a user to the event (owner or admin)."""
    return invitation_service.invite(db, principal, event_id, payload.user_id)


@router.get("/{event_id}/invitations", response_model=list[InvitationOut])
def list_event_invitations(event_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Invitations of an event with their responses (owner or admin)."""
    return invitation_service.list_event_invitations(db, principal, event_id)


@router.post("/{event_id}/join", response_model=InvitationOut, status_code=status.HTTP_201_CREATED)
def join_event(event_id: str, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """Register interest in a public event."""
    return invitation_service.register_interest(db, principal, event_id)


@router.post("/{event_id}/notify", response_model=NotifyResult)
def notify_attendees(
    event_id: str,
    payload: NotifyRequest,
    principal: CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Send a message to every invitee of the event (owner or admin)."""
    notified = notification_service.notify_attendees(db, principal, event_id, payload.message)
    return NotifyResult(event_id=event_id, notified=notified)
