"""Pytest fixtures for API base tests."""

from datetime import datetime
from typing import Annotated, AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from api_base.config import Settings, get_settings
from api_base.core.embeds import EmbedSpec
from api_base.core.errors import ForbiddenError, NotFoundError, ValidationFailed
from api_base.core.responder import ApiResponder
from api_base.core.transformer import AttributeTransformer, Transformer
from api_base.http.application import setup_api
from api_base.http.dependencies import Context, Responder, responder_for
from api_base.repositories import LookupRepository, Repository


class Base(DeclarativeBase):
    """Base class for test models."""

    pass


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))


class PostModel(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    body: Mapped[str] = mapped_column(Text, default="")
    author_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    author: Mapped[UserModel | None] = relationship()
    comments: Mapped[list["CommentModel"]] = relationship(order_by="CommentModel.id")


class CommentModel(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"))
    author_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    text: Mapped[str] = mapped_column(Text)

    author: Mapped[UserModel | None] = relationship()


class CategoryModel(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))


class PostRepository(Repository[PostModel]):
    model = PostModel


class CommentRepository(Repository[CommentModel]):
    model = CommentModel


class CategoryRepository(LookupRepository[CategoryModel]):
    model = CategoryModel
    mass_managed = True
    mass_columns = ("name",)


class UserTransformer(AttributeTransformer):
    fields = ("id", "name")


class CommentTransformer(Transformer):
    relationships = {"author": UserTransformer()}

    def transform(self, comment):
        return {"id": comment.id, "text": comment.text}


class PostTransformer(Transformer):
    relationships = {"author": UserTransformer(), "comments": CommentTransformer()}

    def transform(self, post):
        return {"id": post.id, "title": post.title}


POST_EMBEDS = EmbedSpec(possible=("author", "comments", "comments.author"))


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        environment="test",
        per_page_default=20,
        per_page_max=50,
        log_json=False,
    )


@pytest_asyncio.fixture
async def db_engine():
    """Create in-memory SQLite database engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_session(db_session: AsyncSession) -> AsyncSession:
    """Session with two users, five posts and comments on the first post."""
    alice = UserModel(id=1, name="Alice")
    bob = UserModel(id=2, name="Bob")
    db_session.add_all([alice, bob])
    for post_id in range(1, 6):
        db_session.add(PostModel(id=post_id, title=f"Post {post_id}", author_id=1))
    db_session.add_all(
        [
            CommentModel(id=1, post_id=1, author_id=2, text="First!"),
            CommentModel(id=2, post_id=1, author_id=1, text="Thanks"),
        ]
    )
    db_session.add_all([CategoryModel(id=1, name="News"), CategoryModel(id=2, name="Art")])
    await db_session.flush()
    # Drop identity-map copies so relationships start unloaded
    db_session.expunge_all()
    return db_session


@pytest.fixture
def post_repository(seeded_session) -> PostRepository:
    return PostRepository(seeded_session)


@pytest.fixture
def comment_repository(seeded_session) -> CommentRepository:
    return CommentRepository(seeded_session)


@pytest.fixture
def category_repository(seeded_session) -> CategoryRepository:
    return CategoryRepository(seeded_session)


def build_test_app(session: AsyncSession, settings: Settings) -> FastAPI:
    """Small API exercising every response path."""
    app = FastAPI()
    setup_api(app, settings, version_prefix="/api", metrics=False)

    PostResponder = Annotated[ApiResponder, Depends(responder_for(POST_EMBEDS))]

    @app.get("/api/posts")
    async def list_posts(responder: PostResponder):
        records = await PostRepository(session).paginate(
            responder.context.page_size,
            responder.context.current_cursor_raw,
            embeds=responder.embeds,
        )
        return responder.collection(records, PostTransformer()).to_json_response()

    @app.get("/api/posts/{post_id}")
    async def show_post(post_id: int, responder: PostResponder):
        post = await PostRepository(session).get_by_id(post_id, embeds=responder.embeds)
        if post is None:
            raise NotFoundError("Post not found")
        return responder.item(post, PostTransformer()).to_json_response()

    @app.post("/api/posts/{post_id}/publish")
    async def publish_post(post_id: int, responder: Responder):
        if post_id == 2:
            return responder.error_forbidden("Only drafts can be published").to_json_response()
        return responder.success_notification("Post published").to_json_response()

    @app.post("/api/posts")
    async def create_post(payload: dict, responder: Responder):
        errors: dict[str, list[str]] = {}
        if not payload.get("title"):
            errors["title"] = ["required"]
        if len(payload.get("body", "")) > 10:
            errors.setdefault("body", []).extend(["too long", "invalid"])
        if errors:
            raise ValidationFailed(errors)
        return responder.success_notification("Created", 201).to_json_response()

    @app.get("/api/items/{item_id}")
    async def show_item(item_id: int, responder: Responder):
        return responder.item({"id": item_id}, lambda item: {"id": item["id"]}).to_json_response()

    @app.get("/api/context")
    async def show_context(context: Context):
        return {
            "current": context.current_cursor_raw,
            "previous": context.previous_cursor_raw,
            "page_size": context.page_size,
            "embeds": list(context.requested_embeds),
        }

    @app.get("/api/admin")
    async def admin():
        raise ForbiddenError()

    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


@pytest.fixture
def test_app(seeded_session, test_settings) -> FastAPI:
    app = build_test_app(seeded_session, test_settings)
    app.dependency_overrides[get_settings] = lambda: test_settings
    return app


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client against the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client
