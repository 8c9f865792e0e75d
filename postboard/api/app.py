"""
FastAPI application for Postboard.

Thin HTTP boundary over the operation resolvers: every route resolves the
caller's identity (IdentityMiddleware), calls one resolver and returns its
result. Operation errors come back as

    {"message": str, "status": int, "data": list | null}
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from postboard.auth import AuthContext, IdentityMiddleware, get_auth_context, get_token_codec
from postboard.auth.policies import require_authenticated
from postboard.config import get_settings
from postboard.core.errors import DEFAULT_STATUS, OperationError
from postboard.core.models import (
    LoginResult,
    PostInput,
    PostPage,
    PostView,
    UserInput,
    UserView,
)
from postboard.integrations.sentry import capture_exception, init_sentry
from postboard.services import OperationResolvers
from postboard.storage import DocumentStore, ImageStorage, InMemoryDocumentStore, LocalImageStorage

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    store: DocumentStore
    images: ImageStorage
    resolvers: OperationResolvers


state = AppState()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()
    configure_logging(settings.log_level)

    if init_sentry():
        logger.info("Sentry error tracking enabled")

    state.store = InMemoryDocumentStore()
    state.images = LocalImageStorage(settings.images_dir)
    state.resolvers = OperationResolvers(
        store=state.store,
        images=state.images,
        codec=get_token_codec(),
        posts_per_page=settings.posts_per_page,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    logger.info(f"Postboard API starting in {settings.environment} mode")

    yield

    logger.info("Postboard API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="Postboard API",
    description="Users, posts, and who may touch them",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(IdentityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.mount("/images", StaticFiles(directory=settings.images_dir, check_dir=False), name="images")


# =============================================================================
# Error Boundary
# =============================================================================


@app.exception_handler(OperationError)
async def operation_error_handler(request: Request, exc: OperationError) -> JSONResponse:
    if exc.status is None:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    data = [
        {"message": f"{'.'.join(str(p) for p in err['loc'][1:])}: {err['msg']}"}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"message": "Invalid input.", "status": 422, "data": data},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    capture_exception(exc, path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=DEFAULT_STATUS,
        content={"message": "An error occurred.", "status": DEFAULT_STATUS, "data": None},
    )


# =============================================================================
# Dependencies
# =============================================================================


def get_resolvers() -> OperationResolvers:
    return state.resolvers


# =============================================================================
# Request Models
# =============================================================================


class LoginRequest(BaseModel):
    email: str
    password: str


class StatusRequest(BaseModel):
    status: str


class DeleteResponse(BaseModel):
    deleted: bool


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "postboard-api"}


# =============================================================================
# Auth
# =============================================================================


@app.post("/auth/signup", response_model=UserView, status_code=201)
async def signup(
    data: UserInput,
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    """Create an account."""
    return await resolvers.create_user(data)


@app.post("/auth/login", response_model=LoginResult)
async def login(
    data: LoginRequest,
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    """Exchange credentials for a token."""
    return await resolvers.login(data.email, data.password)


# =============================================================================
# User
# =============================================================================


@app.get("/user", response_model=UserView)
async def get_user(
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return await resolvers.user(ctx)


@app.patch("/user/status", response_model=UserView)
async def update_status(
    data: StatusRequest,
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return await resolvers.update_status(ctx, data.status)


# =============================================================================
# Posts
# =============================================================================


@app.get("/posts", response_model=PostPage)
async def list_posts(
    page: int | None = None,
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return await resolvers.posts(ctx, page)


@app.post("/posts", response_model=PostView, status_code=201)
async def create_post(
    data: PostInput,
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return await resolvers.create_post(ctx, data)


@app.get("/posts/{post_id}", response_model=PostView)
async def get_post(
    post_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return await resolvers.post(ctx, post_id)


@app.put("/posts/{post_id}", response_model=PostView)
async def update_post(
    post_id: str,
    data: PostInput,
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return await resolvers.update_post(ctx, post_id, data)


@app.delete("/posts/{post_id}", response_model=DeleteResponse)
async def delete_post(
    post_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    return DeleteResponse(deleted=await resolvers.delete_post(ctx, post_id))


# =============================================================================
# Images
# =============================================================================


@app.put("/post-image")
async def upload_post_image(
    image: UploadFile | None = File(None),
    old_path: str | None = Form(None),
    ctx: AuthContext = Depends(get_auth_context),
    resolvers: OperationResolvers = Depends(get_resolvers),
):
    """
    Store an image for a post.

    Only png/jpg/jpeg are accepted. When `old_path` is given it must be the
    image of one of the caller's posts (403 otherwise) and is cleared.
    The returned `file_path` goes into the post's image_url.
    """
    require_authenticated(ctx)

    if image is None or image.content_type not in settings.allowed_image_types_set:
        return JSONResponse(status_code=200, content={"message": "No file provided."})

    if old_path:
        await resolvers.clear_owned_image(ctx, old_path)

    data = await image.read()
    path = await resolvers.images.save(image.filename or "image", data, image.content_type)
    return JSONResponse(status_code=201, content={"message": "File stored.", "file_path": path})
