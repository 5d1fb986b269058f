"""
Shared fixtures: an in-memory database, a fake media store and an HTTP
client wired to the FastAPI app with both dependencies overridden.
"""

import io
import os

# Settings are read at import time, so the environment must be ready first
os.environ["SECRET_KEY"] = "k7Qz9vLw2pXr5tYb8nMc4hJf6gDs1aEuR3Nx"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STATS_CACHE_TTL"] = "0"
os.environ["ADMIN_REGISTRATION_KEY"] = "bandhan-admin-onboarding-key"
os.environ["LOG_DIR"] = ""

from datetime import date, datetime
from pathlib import PurePosixPath

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image as PILImage
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, build_session_factory, get_db
from app.main import app
from app.models import Admin, AccountStatus, Gender, User
from app.services import auth_service
from app.services.media import MediaStoreError, get_media_store

MEMBER_PASSWORD = "matchme123"
ADMIN_PASSWORD = "Adm1n!Console#42"

_hash_cache = {}


def password_hash(password: str) -> str:
    # bcrypt is slow on purpose; hash each fixture password once per run
    if password not in _hash_cache:
        _hash_cache[password] = auth_service.get_password_hash(password)
    return _hash_cache[password]


def image_bytes(fmt: str = "PNG", size=(8, 8)) -> bytes:
    buf = io.BytesIO()
    PILImage.new("RGB", size, (180, 40, 90)).save(buf, format=fmt)
    return buf.getvalue()


class FakeMediaStore:
    """Records uploads and deletes instead of calling Cloudinary."""

    def __init__(self):
        self.uploaded = []
        self.destroyed = []
        self.fail_uploads = False
        self.fail_destroy = False

    async def upload(self, media, folder, transformation=None):
        if self.fail_uploads:
            raise MediaStoreError("Error uploading image")
        name = PurePosixPath(media.filename)
        url = (
            "https://res.cloudinary.com/demo/image/upload/v1700000000/"
            f"{folder}/{name.stem}_{len(self.uploaded)}{name.suffix}"
        )
        self.uploaded.append((folder, transformation, url))
        return url

    async def destroy(self, url):
        if self.fail_destroy:
            raise MediaStoreError("Error deleting image")
        self.destroyed.append(url)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest_asyncio.fixture
async def client(session_factory, media_store):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_member(session_factory):
    """Insert a member directly, bypassing the API."""
    counter = {"n": 0}

    async def factory(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        values = dict(
            email=f"member{n}@example.com",
            hashed_password=password_hash(MEMBER_PASSWORD),
            first_name=f"Member{n}",
            last_name="Sharma",
            date_of_birth=date(1994, 3, 12),
            gender=Gender.FEMALE,
            status=AccountStatus.ACTIVE,
            additional_pictures=[],
            photos=[],
            likes_count=0,
        )
        values.update(overrides)
        async with session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return factory


@pytest.fixture
def make_admin(session_factory):
    counter = {"n": 0}

    async def factory(**overrides) -> Admin:
        counter["n"] += 1
        values = dict(
            email=f"admin{counter['n']}@example.com",
            hashed_password=password_hash(ADMIN_PASSWORD),
            first_name="Nisha",
            last_name="Kapoor",
            role="admin",
            permissions=["manage_users", "view_statistics"],
            status=AccountStatus.ACTIVE,
            created_at=datetime.utcnow(),
        )
        values.update(overrides)
        async with session_factory() as session:
            admin = Admin(**values)
            session.add(admin)
            await session.commit()
            await session.refresh(admin)
            return admin

    return factory


@pytest.fixture
def load_user(session_factory):
    """Read a member back through a fresh session."""
    async def loader(user_id: int):
        async with session_factory() as session:
            return await session.get(User, user_id)
    return loader


def member_headers(user) -> dict:
    return {"Authorization": f"Bearer {auth_service.create_user_token(user.id)}"}


def admin_headers(admin) -> dict:
    return {"Authorization": f"Bearer {auth_service.create_admin_token(admin.id)}"}


@pytest.fixture
def auth_for():
    return member_headers


@pytest.fixture
def admin_auth_for():
    return admin_headers


@pytest.fixture
def make_image():
    return image_bytes
