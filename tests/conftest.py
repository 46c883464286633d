"""
Pytest configuration and fixtures
"""
import os
from datetime import datetime, timedelta, timezone

# Settings are read at import time; configure before importing qrkit
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["AUTH_JWT_SECRET"] = "test-secret-please-change"
for _key in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET", "AUTH_JWT_AUDIENCE"):
    os.environ.pop(_key, None)

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import qrkit.domain  # noqa: F401
from qrkit.core.access import ScopedAccess, TrustedExecutor
from qrkit.core.config import settings
from qrkit.db.base import Base, get_db
from qrkit.domain.content import Content
from qrkit.domain.kit import Kit, KitItem, QRKitGrant
from qrkit.domain.qr import QRCode
from qrkit.domain.user import ROLE_ADMIN, ROLE_USER, User
from qrkit.main import create_app
from qrkit.services.storage import get_storage


class FakeStorage:
    """Stands in for Cloudinary: deterministic URLs, uploads recorded in memory."""

    def __init__(self):
        self.signed: list[tuple[str, str, int]] = []
        self.uploads: list[dict] = []

    def signed_url(self, resource_id: str, resource_type: str, expires_in: int) -> str:
        self.signed.append((resource_id, resource_type, expires_in))
        return f"https://cdn.test/{resource_type}/authenticated/{resource_id}?exp={expires_in}&sig=fake"

    def upload(self, file, public_id: str, resource_type: str = "auto") -> dict:
        data = file.read()
        self.uploads.append({"public_id": public_id, "resource_type": resource_type, "size": len(data)})
        return {"public_id": public_id, "bytes": len(data), "resource_type": resource_type}


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    """Fresh in-memory database per test; StaticPool keeps one shared connection."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def race_session_factory(tmp_path):
    """Sessions on separate connections to one SQLite file, for racing writers."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=eng, class_=AsyncSession, expire_on_commit=False)
    await eng.dispose()


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def app(session_factory, storage):
    application = create_app()

    async def _get_db():
        async with session_factory() as s:
            try:
                yield s
            except Exception:
                await s.rollback()
                raise

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_storage] = lambda: storage
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


def auth_headers(user: User, *, secret: str | None = None, expires_in: int = 3600) -> dict:
    claims = {
        "sub": user.id,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    token = jwt.encode(claims, secret or settings.auth_jwt_secret, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Factories (each commits, so HTTP requests on other sessions see the rows)
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(session):
    async def _make(role: str = ROLE_USER, email: str | None = None) -> User:
        user = User(role=role, email=email)
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest.fixture
async def user(make_user):
    return await make_user(email="learner@example.com")


@pytest.fixture
async def other_user(make_user):
    return await make_user(email="someone-else@example.com")


@pytest.fixture
async def admin(make_user):
    return await make_user(role=ROLE_ADMIN, email="admin@example.com")


@pytest.fixture
def scoped(session):
    def _scoped(u: User) -> ScopedAccess:
        return ScopedAccess(session=session, user_id=u.id)

    return _scoped


@pytest.fixture
def trusted(session, admin):
    return TrustedExecutor(session=session, actor_id=admin.id)


@pytest.fixture
def make_qr(session):
    async def _make(code: str, bound_to: User | None = None, is_active: bool = True) -> QRCode:
        qr = QRCode(code=code, is_active=is_active)
        if bound_to is not None:
            qr.bound_by_user_id = bound_to.id
            qr.bound_at = datetime.now(timezone.utc)
        session.add(qr)
        await session.commit()
        return qr

    return _make


@pytest.fixture
def make_kit(session):
    async def _make(name: str = "Starter kit", items: tuple[tuple[str, str], ...] = (), is_active: bool = True) -> Kit:
        kit = Kit(name=name, is_active=is_active)
        session.add(kit)
        await session.flush()
        for content_type, content_id in items:
            session.add(KitItem(kit_id=kit.id, content_type=content_type, content_id=content_id))
            session.add(Content(id=content_id, content_type=content_type, title=f"{content_id} title"))
        await session.commit()
        return kit

    return _make


@pytest.fixture
def make_grant(session):
    async def _make(qr: QRCode, kit: Kit) -> QRKitGrant:
        grant = QRKitGrant(qr_id=qr.id, kit_id=kit.id)
        session.add(grant)
        await session.commit()
        return grant

    return _make


@pytest.fixture
async def entitled(user, make_qr, make_kit, make_grant):
    """A user with an active bound QR granted one kit holding a video and an image."""
    qr = await make_qr("6f1c2a9e-3b7d-4c1e-9a2f-1d4e5b6c7a80", bound_to=user)
    kit = await make_kit("Course A", items=(("VIDEO", "lesson-1"), ("IMAGE", "diagram-1")))
    await make_grant(qr, kit)
    return {"user": user, "qr": qr, "kit": kit}
