import os
import tempfile

# must be set before hotel_api is imported (settings are cached at import)
UPLOAD_DIR = tempfile.mkdtemp(prefix="hotel-uploads-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STATIC_UPLOAD_DIR"] = UPLOAD_DIR
os.environ["ADMIN_EMAIL"] = "frontdesk@example.com"
os.environ["MAIL_TIMEOUT_SECONDS"] = "5"

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hotel_api.core.security import create_access_token
from hotel_api.db import crud_rooms, crud_users
from hotel_api.db.base import Base
from hotel_api.db.session import get_db
from hotel_api.main import app
from hotel_api.services.mailer import Mailer, get_mailer


class RecordingMailer(Mailer):
    def __init__(self):
        self.sent = []

    async def send(self, to, subject, html, attachments=None):
        self.sent.append(
            {"to": to, "subject": subject, "html": html, "attachments": list(attachments or [])}
        )


class FailingMailer(Mailer):
    def __init__(self):
        self.calls = 0

    async def send(self, to, subject, html, attachments=None):
        self.calls += 1
        raise ConnectionRefusedError("smtp unavailable")


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    # match InnoDB: enforce foreign keys
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
async def client(session_factory, mailer):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    async def _make(email, first_name="Ada", role="user", password="secret123"):
        async with session_factory() as s:
            return await crud_users.create_user(
                s, first_name=first_name, email=email, password=password, role=role
            )

    return _make


@pytest.fixture
def auth_header():
    def _header(user):
        token = create_access_token({"sub": str(user.id), "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", first_name="Admin", role="admin")


@pytest.fixture
async def room(session_factory):
    async with session_factory() as s:
        return await crud_rooms.create_room(
            s,
            name="Deluxe King",
            price_per_night=100,
            description="Sea view, king bed",
            max_number_of_adults=2,
            images=["/static/uploads/deluxe.jpg"],
            features=["WiFi", "Minibar"],
            room_number="101",
        )
