"""
Operation resolvers.

One method per use case. Each follows the same sequence:

    authenticate -> validate input -> authorize ownership -> persist -> shape

All methods take the request's AuthContext (except register/login) and
raise OperationError subclasses on failure.
"""

from __future__ import annotations

import asyncio
import logging

from postboard.auth.context import AuthContext
from postboard.auth.passwords import hash_password, verify_password
from postboard.auth.policies import require_authenticated, require_owner
from postboard.auth.tokens import TokenCodec
from postboard.core.errors import (
    Forbidden,
    InvalidCredentials,
    PostNotFound,
    ProfileNotFound,
    Unauthenticated,
    UserExists,
    UserNotFound,
    ValidationFailed,
)
from postboard.core.models import (
    LoginResult,
    PostInput,
    PostPage,
    PostRecord,
    PostView,
    UserInput,
    UserRecord,
    UserView,
)
from postboard.core.utils import utc_now
from postboard.services.validation import normalize_email, validate_post_input, validate_user_input
from postboard.storage.base import DocumentStore, ImageStorage, SortOrder

logger = logging.getLogger(__name__)

# Passing this as image_url on update keeps the current image.
UNCHANGED_IMAGE = "undefined"

NEWEST_FIRST = ("created_at", SortOrder.DESCENDING)


class OperationResolvers:
    """
    The operations the API exposes.

    Example:
        resolvers = OperationResolvers(store, images, codec)
        await resolvers.create_user(UserInput(email="a@x.com", password="abcde"))
        result = await resolvers.login("a@x.com", "abcde")
    """

    def __init__(
        self,
        store: DocumentStore,
        images: ImageStorage,
        codec: TokenCodec,
        posts_per_page: int = 2,
        bcrypt_rounds: int | None = None,
    ):
        self.store = store
        self.images = images
        self.codec = codec
        self.posts_per_page = posts_per_page
        self.bcrypt_rounds = bcrypt_rounds

    # =========================================================================
    # Users
    # =========================================================================

    async def create_user(self, data: UserInput) -> UserView:
        """Register a new account."""
        validate_user_input(data)
        email = normalize_email(data.email)

        if await self.store.find_user_by_email(email):
            raise UserExists()

        # bcrypt runs in a worker thread
        password_hash = await asyncio.to_thread(
            hash_password, data.password, rounds=self.bcrypt_rounds
        )
        user = UserRecord(
            email=email,
            name=data.name,
            password_hash=password_hash,
        )
        await self.store.save_user(user)
        logger.info(f"Registered user {user.id}")
        return UserView.from_record(user)

    async def login(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a token."""
        user = await self.store.find_user_by_email(normalize_email(email) or email)
        if not user:
            raise UserNotFound()

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise InvalidCredentials()

        token = self.codec.issue(user.id, user.email)
        return LoginResult(token=token, user_id=user.id)

    async def user(self, ctx: AuthContext) -> UserView:
        """The caller's own profile."""
        require_authenticated(ctx)
        user = await self._caller(ctx)
        return UserView.from_record(user)

    async def update_status(self, ctx: AuthContext, status: str) -> UserView:
        """Change the caller's status line."""
        require_authenticated(ctx)
        user = await self._caller(ctx)

        user.status = status
        user.updated_at = utc_now()
        await self.store.save_user(user)
        return UserView.from_record(user)

    # =========================================================================
    # Posts
    # =========================================================================

    async def create_post(self, ctx: AuthContext, data: PostInput) -> PostView:
        """
        Create a post owned by the caller.

        Two writes: the post itself, then its id on the owner's post list.
        If the second write fails the post is removed again.
        """
        require_authenticated(ctx)
        validate_post_input(data)

        user = await self.store.find_user_by_id(ctx.caller_id)
        if not user:
            raise Unauthenticated("Invalid user.")

        post = PostRecord(
            title=data.title,
            content=data.content,
            image_url=data.image_url,
            creator=user.id,
        )
        await self.store.save_post(post)

        user.posts.append(post.id)
        try:
            await self.store.save_user(user)
        except Exception:
            logger.error(f"Linking post {post.id} to user {user.id} failed, removing post")
            await self.store.delete_post_by_id(post.id)
            raise

        logger.info(f"User {user.id} created post {post.id}")
        return PostView.from_record(post, user)

    async def posts(self, ctx: AuthContext, page: int | None = None) -> PostPage:
        """A page of posts, newest first, plus the total count."""
        require_authenticated(ctx)

        page = page or 1
        if page < 1:
            raise ValidationFailed(["Page must be a positive number."])

        total_posts = await self.store.count_posts()
        records = await self.store.find_posts(
            NEWEST_FIRST,
            skip=(page - 1) * self.posts_per_page,
            limit=self.posts_per_page,
        )

        posts = [await self._shape(p) for p in records]
        return PostPage(posts=posts, total_posts=total_posts)

    async def post(self, ctx: AuthContext, post_id: str) -> PostView:
        """A single post."""
        require_authenticated(ctx)
        post = await self._find_post(post_id)
        return await self._shape(post)

    async def update_post(self, ctx: AuthContext, post_id: str, data: PostInput) -> PostView:
        """Edit a post. Only its creator may do this."""
        require_authenticated(ctx)
        validate_post_input(data)

        post = await self._find_post(post_id)
        require_owner(ctx, post.creator)

        post.title = data.title
        post.content = data.content
        if data.image_url is not None and data.image_url != UNCHANGED_IMAGE:
            post.image_url = data.image_url
        post.touch()

        await self.store.save_post(post)
        return await self._shape(post)

    async def delete_post(self, ctx: AuthContext, post_id: str) -> bool:
        """
        Delete a post. Only its creator may do this.

        Not found and not authorized raise as usual. A storage failure
        while deleting the record or unlinking it from the owner is logged
        and reported as False. Image cleanup runs last and is best-effort:
        once the record is gone the result is True even if the file stays.
        """
        require_authenticated(ctx)

        post = await self._find_post(post_id)
        require_owner(ctx, post.creator)

        try:
            await self.store.delete_post_by_id(post.id)
            owner = await self.store.find_user_by_id(post.creator)
            if owner and post.id in owner.posts:
                owner.posts.remove(post.id)
                await self.store.save_user(owner)
        except Exception:
            logger.exception(f"Deleting post {post.id} failed")
            return False

        if post.image_url:
            await self.clear_image(post.image_url)

        logger.info(f"User {ctx.caller_id} deleted post {post.id}")
        return True

    # =========================================================================
    # Images
    # =========================================================================

    async def clear_image(self, path: str) -> bool:
        """Best-effort image removal. Failures are logged, never raised."""
        try:
            return await self.images.clear(path)
        except Exception as e:
            logger.warning(f"Could not clear image {path}: {e}")
            return False

    async def clear_owned_image(self, ctx: AuthContext, path: str) -> bool:
        """
        Clear an image the caller is replacing.

        The path must be the image_url of one of the caller's own posts;
        anything else raises Forbidden (403) and nothing is removed.
        """
        require_authenticated(ctx)
        user = await self._caller(ctx)

        for post_id in user.posts:
            post = await self.store.find_post_by_id(post_id)
            if post and post.image_url == path:
                return await self.clear_image(path)

        logger.info(f"Caller {ctx.caller_id} denied clearing image {path}")
        raise Forbidden()

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _caller(self, ctx: AuthContext) -> UserRecord:
        user = await self.store.find_user_by_id(ctx.caller_id)
        if not user:
            raise ProfileNotFound()
        return user

    async def _find_post(self, post_id: str) -> PostRecord:
        post = await self.store.find_post_by_id(post_id)
        if not post:
            raise PostNotFound()
        return post

    async def _shape(self, post: PostRecord) -> PostView:
        creator = await self.store.find_user_by_id(post.creator)
        return PostView.from_record(post, creator)
