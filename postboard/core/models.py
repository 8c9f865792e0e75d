"""
Core data models.

Records are what the document store keeps. Views are what operations
hand back to callers; they never carry the password hash.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from postboard.core.utils import generate_id, isoformat, utc_now


DEFAULT_USER_STATUS = "I am new!"


# =============================================================================
# Records
# =============================================================================


class UserRecord(BaseModel):
    """A registered user as stored."""

    id: str = Field(default_factory=lambda: generate_id("user"))
    email: str
    name: str = ""
    password_hash: str
    status: str = DEFAULT_USER_STATUS

    # Post ids, oldest first
    posts: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class PostRecord(BaseModel):
    """A post as stored. `creator` is the owning user's id and never changes."""

    id: str = Field(default_factory=lambda: generate_id("post"))
    title: str
    content: str
    image_url: str | None = None
    creator: str

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def touch(self) -> None:
        self.updated_at = utc_now()


# =============================================================================
# Inputs
# =============================================================================


class UserInput(BaseModel):
    email: str
    name: str = ""
    password: str


class PostInput(BaseModel):
    title: str
    content: str
    image_url: str | None = None


# =============================================================================
# Views
# =============================================================================


class UserView(BaseModel):
    """Public profile data."""

    id: str
    email: str
    name: str
    status: str
    posts: list[str]

    @classmethod
    def from_record(cls, user: UserRecord) -> UserView:
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            status=user.status,
            posts=list(user.posts),
        )


class CreatorView(BaseModel):
    id: str
    name: str


class PostView(BaseModel):
    id: str
    title: str
    content: str
    image_url: str | None
    creator: CreatorView
    created_at: str
    updated_at: str

    @classmethod
    def from_record(cls, post: PostRecord, creator: UserRecord | None) -> PostView:
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            image_url=post.image_url,
            creator=CreatorView(
                id=post.creator,
                name=creator.name if creator else "",
            ),
            created_at=isoformat(post.created_at),
            updated_at=isoformat(post.updated_at),
        )


class PostPage(BaseModel):
    posts: list[PostView]
    total_posts: int


class LoginResult(BaseModel):
    token: str
    user_id: str
