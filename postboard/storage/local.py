"""
Local storage implementations for development.

These are in-memory or filesystem-based implementations
that work without any external services.
"""

from __future__ import annotations

from itertools import count
from pathlib import Path, PurePath
import uuid

from postboard.core.models import PostRecord, UserRecord
from postboard.storage.base import DocumentStore, ImageStorage, Sort, SortOrder


# =============================================================================
# In-Memory Document Store
# =============================================================================


class InMemoryDocumentStore(DocumentStore):
    """In-memory user/post storage for development and tests."""

    def __init__(self):
        self._users: dict[str, UserRecord] = {}
        self._users_by_email: dict[str, str] = {}  # email -> user_id
        self._posts: dict[str, PostRecord] = {}
        # Insertion sequence breaks ties between equal sort keys
        self._post_seq: dict[str, int] = {}
        self._seq = count()

    # Users

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        user_id = self._users_by_email.get(email.lower())
        return await self.find_user_by_id(user_id) if user_id else None

    async def find_user_by_id(self, user_id: str) -> UserRecord | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def save_user(self, user: UserRecord) -> UserRecord:
        email = user.email.lower()
        owner = self._users_by_email.get(email)
        if owner is not None and owner != user.id:
            raise ValueError(f"Email already registered: {user.email}")

        previous = self._users.get(user.id)
        if previous is not None and previous.email.lower() != email:
            del self._users_by_email[previous.email.lower()]

        self._users[user.id] = user.model_copy(deep=True)
        self._users_by_email[email] = user.id
        return user

    # Posts

    async def find_post_by_id(self, post_id: str) -> PostRecord | None:
        post = self._posts.get(post_id)
        return post.model_copy(deep=True) if post else None

    async def find_posts(self, sort: Sort, skip: int = 0, limit: int = 100) -> list[PostRecord]:
        field, order = sort
        results = sorted(
            self._posts.values(),
            key=lambda p: (getattr(p, field), self._post_seq[p.id]),
            reverse=order == SortOrder.DESCENDING,
        )
        return [p.model_copy(deep=True) for p in results[skip:skip + limit]]

    async def count_posts(self) -> int:
        return len(self._posts)

    async def save_post(self, post: PostRecord) -> PostRecord:
        if post.id not in self._post_seq:
            self._post_seq[post.id] = next(self._seq)
        self._posts[post.id] = post.model_copy(deep=True)
        return post

    async def delete_post_by_id(self, post_id: str) -> bool:
        if post_id in self._posts:
            del self._posts[post_id]
            del self._post_seq[post_id]
            return True
        return False


# =============================================================================
# Local Filesystem Image Storage
# =============================================================================


class LocalImageStorage(ImageStorage):
    """
    Store images on local filesystem.

    Returned paths are relative to `root` and use forward slashes,
    e.g. "images/0b1c...-photo.png".
    """

    def __init__(self, images_dir: str = "images", root: str | Path = "."):
        self.root = Path(root).resolve()
        self.images_dir = images_dir
        self.base_path = (self.root / images_dir).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, stored_path: str) -> Path:
        path = (self.root / stored_path).resolve()
        if self.base_path not in path.parents:
            raise ValueError(f"Refusing to touch a path outside {self.images_dir}: {stored_path}")
        return path

    async def save(self, filename: str, data: bytes, content_type: str) -> str:
        name = f"{uuid.uuid4()}-{PurePath(filename).name}"
        path = self.base_path / name
        path.write_bytes(data)
        return path.relative_to(self.root).as_posix()

    async def clear(self, path: str) -> bool:
        target = self._path_for(path)
        if not target.exists():
            raise FileNotFoundError(f"Image not found: {path}")
        target.unlink()
        return True
