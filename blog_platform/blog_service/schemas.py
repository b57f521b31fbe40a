from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Any, Dict, Optional


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request bodies. Every field is optional so that the handlers can answer
# missing fields with their own 400 messages.

class UserCreate(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PostCreate(CamelModel):
    title: Optional[str] = None
    short_text: Optional[str] = None
    full_text: Optional[str] = None


class PostUpdate(CamelModel):
    id: Optional[str] = None
    title: Optional[str] = None
    short_text: Optional[str] = None
    full_text: Optional[str] = None
    post_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("metadata", "post_metadata"),
        serialization_alias="metadata",
    )

    @field_validator("post_metadata")
    @classmethod
    def validate_published_flag(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """The published flag must be a real JSON boolean, never 1/0 or a string"""
        if v is not None and "published" in v and not isinstance(v["published"], bool):
            raise ValueError("metadata.published must be a boolean")
        return v


class PostDelete(CamelModel):
    id: Optional[str] = None


# Public views. Only the fields declared here ever leave the service.

class UserProfile(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class PostOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    short_text: str
    full_text: str
    # ORM rows expose the declarative MetaData as `metadata`, so the mapped
    # column attribute is read first
    post_metadata: Dict[str, Any] = Field(
        validation_alias=AliasChoices("post_metadata", "metadata"),
        serialization_alias="metadata",
    )
    owner_id: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class Identity(BaseModel):
    """Authenticated caller resolved from the bearer token."""
    id: Optional[str] = None
