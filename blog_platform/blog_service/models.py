from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Index, JSON, text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at/updated_at plus the soft-delete marker shared by all entities."""
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    # Soft delete: a non-null value means the row is logically deleted
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False)
    # passlib hash, never the plaintext
    password = Column(String, nullable=False)

    posts = relationship("Post", back_populates="owner")

    __table_args__ = (
        # Email is unique among accounts that have not been soft deleted
        Index(
            "ux_users_email_active",
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, deleted_at={self.deleted_at})>"


class Post(TimestampMixin, Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False, default="")
    short_text = Column(String, nullable=False, default="")
    full_text = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    post_metadata = Column("metadata", JSON, nullable=False, default=lambda: {"published": False})
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    owner = relationship("User", back_populates="posts")

    __table_args__ = (
        Index('ix_posts_owner_id', 'owner_id'),
        Index('ix_posts_updated_at', 'updated_at'),
    )

    @property
    def is_published(self) -> bool:
        return bool(self.post_metadata) and self.post_metadata.get("published") is True

    def __repr__(self):
        return f"<Post(id={self.id}, owner_id={self.owner_id}, published={self.is_published})>"
