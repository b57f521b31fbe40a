"""
Data access for blog posts.

Posts are hard deleted, but reads still go through the soft-delete aware
``active`` query so rows marked by other tooling stay hidden.
"""
from sqlalchemy import true
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..errors import AuthError, NotFoundError, ValidationError
from ..models import Post
from ..schemas import Identity, PostCreate, PostOut, PostUpdate
from ..utils.transforms import capitalize
from .base import active, commit_or_raise

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Impossible to find the post"


def _published(db: Session):
    # JSON extraction cannot tell true from 1 on every backend, so the SQL
    # filter is a coarse pass and Post.is_published has the final say
    return active(Post, db).filter(Post.post_metadata["published"].as_boolean() == true())


def _get_post(post_id: str, db: Session, acting_user_id: Optional[str] = None) -> Post:
    """
    Load a post for modification.

    When ``acting_user_id`` is given the caller must own the post.
    """
    post = active(Post, db).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError(POST_NOT_FOUND)
    if acting_user_id is not None and post.owner_id != acting_user_id:
        raise AuthError("NOT THE OWNER OF THE POST")
    return post


def get_published_posts(db: Session) -> List[PostOut]:
    """Published, non-deleted posts, most recently updated first."""
    posts = _published(db).order_by(Post.updated_at.desc()).all()
    return [PostOut.model_validate(post) for post in posts if post.is_published]


def get_published_post_by_id(post_id: str, db: Session) -> PostOut:
    """
    Raises:
        NotFoundError: If the post is absent, unpublished or deleted
    """
    post = _published(db).filter(Post.id == post_id).first()
    if not post or not post.is_published:
        raise NotFoundError(POST_NOT_FOUND)
    return PostOut.model_validate(post)


def create_post(fields: PostCreate, acting_user: Identity, db: Session) -> PostOut:
    """
    Create an unpublished post owned by ``acting_user``.

    Raises:
        ValidationError: If fullText is missing
        ConstraintError: If the owner does not satisfy the foreign key
    """
    if not fields.full_text:
        raise ValidationError("fullText is required")
    post = Post(
        title=capitalize(fields.title),
        short_text=fields.short_text or "",
        full_text=fields.full_text,
        post_metadata={"published": False},
        owner_id=acting_user.id,
    )
    db.add(post)
    commit_or_raise(db)
    db.refresh(post)

    logger.info("Post created: post_id=%s owner_id=%s", post.id, post.owner_id)
    return PostOut.model_validate(post)


def update_post(fields: PostUpdate, db: Session, acting_user_id: Optional[str] = None) -> PostOut:
    """
    Overwrite the supplied fields of the post identified by ``fields.id``.

    Ownership is only checked when ``acting_user_id`` is given.
    """
    post = _get_post(fields.id, db, acting_user_id)

    if fields.title is not None:
        post.title = capitalize(fields.title)
    if fields.short_text is not None:
        post.short_text = fields.short_text
    if fields.full_text is not None:
        post.full_text = fields.full_text
    if fields.post_metadata is not None:
        post.post_metadata = dict(fields.post_metadata)

    commit_or_raise(db)
    db.refresh(post)

    logger.info("Post updated: post_id=%s", post.id)
    return PostOut.model_validate(post)


def publish_post(
    acting_user_id: Optional[str],
    post_id: str,
    db: Session,
    enforce_ownership: bool = False
) -> PostOut:
    """
    Mark a post as published, keeping any other metadata keys.

    Raises:
        NotFoundError: If the post does not exist
        AuthError: If ownership is enforced and the caller is not the owner
    """
    post = _get_post(post_id, db, acting_user_id if enforce_ownership else None)

    # Reassign so the JSON column is flagged as modified
    post.post_metadata = {**(post.post_metadata or {}), "published": True}
    commit_or_raise(db)
    db.refresh(post)

    logger.info("Post published: post_id=%s by user_id=%s", post.id, acting_user_id)
    return PostOut.model_validate(post)


def delete_post(post_id: str, db: Session, acting_user_id: Optional[str] = None) -> int:
    """Physically remove a post. Returns the number of rows affected."""
    if acting_user_id is not None:
        _get_post(post_id, db, acting_user_id)

    count = db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
    commit_or_raise(db)

    logger.info("Post deleted: post_id=%s rows=%s", post_id, count)
    return count
