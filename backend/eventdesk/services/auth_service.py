"""Registration and login."""
import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventdesk.config import settings
from eventdesk.errors import (
    DuplicateCredential,
    Forbidden,
    InvalidCredential,
    NotFound,
    ValidationError,
)
from eventdesk.models.user import Role, User
from eventdesk.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def register(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: Optional[str] = None,
    admin_token: Optional[str] = None,
) -> User:
    """Create a user with a salted password hash. Role defaults to attendee."""
    username = (username or "").strip()
    email = (email or "").strip().lower()
    if not username or not email or not password:
        raise ValidationError("username, email and password are required")

    try:
        user_role = Role(role) if role else Role.attendee
    except ValueError:
        raise ValidationError(f"Invalid role: {role}")

    if user_role == Role.admin:
        expected = settings.ADMIN_REGISTRATION_TOKEN
        if not expected or admin_token != expected:
            raise Forbidden("Admin registration requires a valid admin token")

    existing = db.query(User).filter(or_(User.username == username, User.email == email)).first()
    if existing:
        raise DuplicateCredential()

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=user_role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name/email.
        db.rollback()
        raise DuplicateCredential()
    db.refresh(user)
    logger.info("Registered user %s (%s) as %s", user.user_id, user.username, user.role.value)
    return user


def login(db: Session, identifier: str, password: str) -> tuple[str, User]:
    """Look up a user by username or email and issue a token."""
    identifier = (identifier or "").strip()
    user = (
        db.query(User)
        .filter(or_(User.username == identifier, User.email == identifier.lower()))
        .first()
    )
    if not user:
        logger.warning("Login failed: no user matching %r", identifier)
        raise NotFound("User not found")
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: bad password for user %s", user.user_id)
        raise InvalidCredential()

    token = create_access_token(user.user_id, user.username, user.role.value)
    logger.info("User %s logged in", user.user_id)
    return token, user


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at, User.username).all()


def change_role(db: Session, user_id: str, role: str) -> User:
    """Admin-only: change a user's role."""
    try:
        new_role = Role(role)
    except ValueError:
        raise ValidationError(f"Invalid role: {role}")
    user = get_user(db, user_id)
    user.role = new_role
    db.commit()
    db.refresh(user)
    logger.info("Changed role of user %s to %s", user_id, new_role.value)
    return user
