"""
User account routes.

``router`` holds the public signup/login endpoints, ``protected_router`` the
ones that act on the authenticated caller's own account.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..auth import get_current_identity
from ..db import get_db
from ..errors import ValidationError
from ..repositories import users as user_repository
from ..schemas import Identity, UserCreate, UserLogin, UserUpdate
from ..utils.responses import error_response, failure_response, success_response

router = APIRouter(prefix="/users", tags=["users"])
protected_router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_identity)],
)
logger = logging.getLogger(__name__)

CREDENTIALS_REQUIRED = "email and password are required"


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(request: Request, payload: Optional[UserCreate] = None, db: Session = Depends(get_db)):
    """Create an account and hand back a token for it."""
    payload = payload or UserCreate()
    if not payload.email or not payload.password:
        return failure_response(CREDENTIALS_REQUIRED, status.HTTP_400_BAD_REQUEST)

    try:
        profile = user_repository.create_user(payload, db)
    except ValidationError as e:
        return error_response(e, "create user", status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        return error_response(e, "create user")

    token = request.app.state.token_service.header_value(profile.id)
    return success_response(
        "user created",
        status.HTTP_201_CREATED,
        token=token,
        profile=profile,
    )


@router.post("/login")
def login_user(request: Request, payload: Optional[UserLogin] = None, db: Session = Depends(get_db)):
    payload = payload or UserLogin()
    if not payload.email or not payload.password:
        return failure_response(CREDENTIALS_REQUIRED, status.HTTP_400_BAD_REQUEST)

    try:
        profile = user_repository.login_user(payload.email, payload.password, db)
    except Exception as e:
        return error_response(e, "login user")

    logger.info("User logged in: user_id=%s", profile.id)
    token = request.app.state.token_service.header_value(profile.id)
    return success_response("user logged in", token=token, profile=profile)


@protected_router.get("")
def get_user(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    """Profile of the authenticated caller."""
    try:
        profile = user_repository.get_user(identity.id, db)
    except Exception as e:
        return error_response(e, "get user")

    return success_response("user logged in", profile=profile)


@protected_router.put("")
def update_user(
    request: Request,
    payload: Optional[UserUpdate] = None,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Update the caller's own profile. Only the authenticated id is ever
    targeted, whatever the body says.
    """
    payload = payload or UserUpdate()
    if not identity.id:
        return failure_response("ID is mandatory for updating a user account", status.HTTP_400_BAD_REQUEST)

    try:
        profile = user_repository.update_user(payload, identity.id, db)
    except Exception as e:
        return error_response(e, "update user")

    token = request.app.state.token_service.header_value(profile.id)
    return success_response("user successfully updated", token=token, profile=profile)


@protected_router.delete("")
def delete_user(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    if not identity.id:
        return failure_response("ID is mandatory for deleting a user", status.HTTP_400_BAD_REQUEST)

    try:
        user_repository.delete_user(identity.id, db)
    except Exception as e:
        return error_response(e, "delete the user")

    return success_response("user successfully removed")
