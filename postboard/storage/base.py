"""
Storage abstraction layer.

The resolvers only talk to these interfaces. Swapping the in-memory
store for MongoDB, or local image files for S3, does not touch them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from postboard.core.models import PostRecord, UserRecord


class SortOrder(int, Enum):
    ASCENDING = 1
    DESCENDING = -1


# (field, order), e.g. ("created_at", SortOrder.DESCENDING)
Sort = tuple[str, SortOrder]


# =============================================================================
# Storage Interfaces
# =============================================================================


class DocumentStore(ABC):
    """
    Storage for users and posts.

    Local Implementation: in-memory dicts
    """

    # Users

    @abstractmethod
    async def find_user_by_email(self, email: str) -> UserRecord | None:
        """Get a user by email (case-insensitive)."""
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> UserRecord | None:
        """Get a user by ID."""
        pass

    @abstractmethod
    async def save_user(self, user: UserRecord) -> UserRecord:
        """Insert or replace a user."""
        pass

    # Posts

    @abstractmethod
    async def find_post_by_id(self, post_id: str) -> PostRecord | None:
        """Get a post by ID."""
        pass

    @abstractmethod
    async def find_posts(self, sort: Sort, skip: int = 0, limit: int = 100) -> list[PostRecord]:
        """Get a sorted, bounded range of posts."""
        pass

    @abstractmethod
    async def count_posts(self) -> int:
        """Total number of posts."""
        pass

    @abstractmethod
    async def save_post(self, post: PostRecord) -> PostRecord:
        """Insert or replace a post."""
        pass

    @abstractmethod
    async def delete_post_by_id(self, post_id: str) -> bool:
        """Delete a post. Returns False if it did not exist."""
        pass


class ImageStorage(ABC):
    """
    Storage for uploaded post images.

    Local Implementation: Filesystem
    """

    @abstractmethod
    async def save(self, filename: str, data: bytes, content_type: str) -> str:
        """Store an image, return the path to keep on the post."""
        pass

    @abstractmethod
    async def clear(self, path: str) -> bool:
        """Delete the image at this path."""
        pass
