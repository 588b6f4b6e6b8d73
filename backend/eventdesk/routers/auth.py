"""Authentication API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventdesk.config import settings
from eventdesk.database import get_db
from eventdesk.dependencies import CurrentPrincipal
from eventdesk.policy import capabilities
from eventdesk.schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserOut,
)
from eventdesk.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account. Role defaults to attendee."""
    return auth_service.register(
        db=db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        admin_token=payload.admin_token,
    )


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange username-or-email and password for a bearer token."""
    token, user = auth_service.login(db, payload.username, payload.password)
    return LoginResponse(
        token=token,
        expires_in=settings.TOKEN_EXPIRE_MINUTES * 60,
        user=UserOut.model_validate(user),
    )


@router.get("/me", response_model=CurrentUserResponse)
def me(principal: CurrentPrincipal, db: Session = Depends(get_db)):
    """The caller's profile and the actions their role allows."""
    user = auth_service.get_user(db, principal.user_id)
    return CurrentUserResponse(
        user=UserOut.model_validate(user),
        capabilities=capabilities(user.role),
    )
