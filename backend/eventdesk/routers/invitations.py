"""Invitation API routes for the invitee side."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventdesk.database import get_db
from eventdesk.dependencies import CurrentPrincipal
from eventdesk.schemas.invitation import InvitationOut, MyInvitationOut, RespondRequest
from eventdesk.services import invitation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/my-invitations", response_model=list[MyInvitationOut])
def list_my_invitations(principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """The caller's invitations with event summaries."""
    return invitation_service.list_my_invitations(db, principal)


@router.post("/invitations/{invitation_id}/respond", response_model=InvitationOut)
def respond_to_invitation(
    invitation_id: str,
    payload: RespondRequest,
    principal: CurrentPrincipal,
    db: Session = Depends(get_db),
):
    """Answer an invitation with 'yes' or 'no'. The first answer is final."""
    return invitation_service.respond(db, principal, invitation_id, payload.response)
