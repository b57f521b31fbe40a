"""
Data access for user accounts.

All functions return the public ``UserProfile`` view; the password hash
never leaves this module.
"""
from sqlalchemy.orm import Session
import logging

from ..auth import hash_password, verify_password
from ..errors import AuthError, NotFoundError, ValidationError
from ..models import User, utcnow
from ..schemas import UserCreate, UserProfile, UserUpdate
from ..utils.transforms import capitalize, check_email
from .base import active, commit_or_raise

logger = logging.getLogger(__name__)

UNKNOWN_USER = "UNKNOWN OR DELETED USER"


def create_user(fields: UserCreate, db: Session) -> UserProfile:
    """
    Create an account from signup data.

    Args:
        fields: email and password are required, names default to ""
        db: Database session

    Returns:
        Public profile of the new user

    Raises:
        ValidationError: If the password is missing or the email is
            missing or malformed
        ConstraintError: If an active account already uses the email
    """
    if not fields.password:
        raise ValidationError("password is required")
    user = User(
        email=check_email(fields.email),
        first_name=capitalize(fields.first_name or ""),
        last_name=capitalize(fields.last_name or ""),
        password=hash_password(fields.password),
    )
    db.add(user)
    commit_or_raise(db)
    db.refresh(user)

    logger.info("User created: user_id=%s", user.id)
    return UserProfile.model_validate(user)


def login_user(email: str, password: str, db: Session) -> UserProfile:
    """
    Check credentials. There is no lockout: every attempt is judged on the
    password alone.

    Raises:
        AuthError: UNKNOWN OR DELETED USER, or INVALID CREDENTIALS
    """
    user = active(User, db).filter(User.email == email).first()
    if not user:
        raise AuthError(UNKNOWN_USER)
    if not verify_password(password, user.password):
        raise AuthError("INVALID CREDENTIALS")
    return UserProfile.model_validate(user)


def get_user(user_id: str, db: Session) -> UserProfile:
    user = active(User, db).filter(User.id == user_id).first()
    if not user:
        raise AuthError(UNKNOWN_USER)
    return UserProfile.model_validate(user)


def update_user(fields: UserUpdate, user_id: str, db: Session) -> UserProfile:
    """
    Overwrite the supplied profile fields of an active account.

    The caller is trusted to pass an id it is allowed to modify; the routes
    always pass the authenticated caller's own id.

    Raises:
        NotFoundError: If no active account has this id
        ValidationError: If a new email is malformed
        ConstraintError: If the new email is taken
    """
    user = active(User, db).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(UNKNOWN_USER)

    if fields.email is not None:
        user.email = check_email(fields.email)
    if fields.first_name is not None:
        user.first_name = capitalize(fields.first_name)
    if fields.last_name is not None:
        user.last_name = capitalize(fields.last_name)
    if fields.password:
        user.password = hash_password(fields.password)

    commit_or_raise(db)
    db.refresh(user)

    logger.info("User updated: user_id=%s", user.id)
    return UserProfile.model_validate(user)


def delete_user(user_id: str, db: Session) -> int:
    """Soft delete an account. Returns the number of rows affected."""
    count = (
        active(User, db)
        .filter(User.id == user_id)
        .update({User.deleted_at: utcnow()}, synchronize_session=False)
    )
    commit_or_raise(db)

    logger.info("User soft deleted: user_id=%s rows=%s", user_id, count)
    return count
