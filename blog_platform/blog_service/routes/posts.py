"""
Post routes: public reads of published posts and authenticated writes.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import Optional

from ..auth import get_current_identity
from ..db import get_db
from ..errors import ValidationError
from ..repositories import posts as post_repository
from ..schemas import Identity, PostCreate, PostDelete, PostUpdate
from ..utils.responses import error_response, failure_response, success_response

router = APIRouter(prefix="/posts", tags=["posts"])
protected_router = APIRouter(
    prefix="/posts",
    tags=["posts"],
    dependencies=[Depends(get_current_identity)],
)

POST_ID_REQUIRED = "The ID of the post is required"


def owner_check_id(request: Request, identity: Identity) -> Optional[str]:
    """Caller id to check post ownership against, or None when not enforced."""
    if request.app.state.settings.ENFORCE_POST_OWNERSHIP:
        return identity.id
    return None


@router.get("/published")
def get_published_posts(db: Session = Depends(get_db)):
    try:
        posts = post_repository.get_published_posts(db)
    except Exception as e:
        return error_response(e, "get the published posts")

    return success_response(
        "All the published posts are successfully retrieved",
        posts=posts,
    )


@router.get("/published/{post_id}")
def get_published_post_by_id(post_id: str, db: Session = Depends(get_db)):
    try:
        post = post_repository.get_published_post_by_id(post_id, db)
    except Exception as e:
        return error_response(e, "get post")

    return success_response(
        "Details of the published post are successfully retrieved",
        post=post,
    )


@protected_router.post("")
def create_post(
    payload: Optional[PostCreate] = None,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    payload = payload or PostCreate()
    if not payload.title or not payload.full_text:
        return failure_response("The title and the fullText are required", status.HTTP_400_BAD_REQUEST)

    try:
        post = post_repository.create_post(payload, identity, db)
    except ValidationError as e:
        return error_response(e, "create the post", status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        return error_response(e, "create the post")

    return success_response("The post is successfully created", post=post)


@protected_router.put("")
def update_post(
    request: Request,
    payload: Optional[PostUpdate] = None,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    payload = payload or PostUpdate()
    if not payload.id:
        return failure_response(POST_ID_REQUIRED, status.HTTP_400_BAD_REQUEST)

    try:
        post_repository.update_post(payload, db, owner_check_id(request, identity))
    except Exception as e:
        return error_response(e, "update the post")

    return success_response("The post is successfully updated")


@protected_router.delete("")
def delete_post(
    request: Request,
    payload: Optional[PostDelete] = None,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    payload = payload or PostDelete()
    if not payload.id:
        return failure_response(POST_ID_REQUIRED, status.HTTP_400_BAD_REQUEST)

    try:
        post_repository.delete_post(payload.id, db, owner_check_id(request, identity))
    except Exception as e:
        return error_response(e, "delete the post")

    return success_response("The post is successfully deleted")


@protected_router.put("/{post_id}/publish")
def publish_post(
    post_id: str,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    try:
        post = post_repository.publish_post(
            identity.id,
            post_id,
            db,
            enforce_ownership=request.app.state.settings.ENFORCE_POST_OWNERSHIP,
        )
    except Exception as e:
        return error_response(e, "publish the post")

    return success_response("The post is successfully published", post=post)
