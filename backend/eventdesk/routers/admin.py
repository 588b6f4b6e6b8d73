"""Admin-only API routes: statistics, all events, user management."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventdesk.database import get_db
from eventdesk.dependencies import AdminPrincipal
from eventdesk.schemas.event import EventOut
from eventdesk.schemas.statistics import StatisticsOut
from eventdesk.schemas.user import RoleUpdate, UserOut
from eventdesk.services import auth_service, event_service, statistics_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/statistics", response_model=StatisticsOut, response_model_by_alias=True)
def get_statistics(principal: AdminPrincipal, db: Session = Depends(get_db)):
    """Aggregate counts over users and events."""
    return statistics_service.get_statistics(db)


@router.get("/events", response_model=list[EventOut])
def list_all_events(principal: AdminPrincipal, db: Session = Depends(get_db)):
    """Every event in the system."""
    return event_service.list_events(db, principal, "all")


@router.get("/users", response_model=list[UserOut])
def list_users(principal: AdminPrincipal, db: Session = Depends(get_db)):
    """Every registered user."""
    return auth_service.list_users(db)


@router.patch("/users/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: str,
    payload: RoleUpdate,
    principal: AdminPrincipal,
    db: Session = Depends(get_db),
):
    """Change a user's role."""
    return auth_service.change_role(db, user_id, payload.role)
