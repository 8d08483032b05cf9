import os
import tempfile
from datetime import datetime

# Point the app at throwaway storage before any eventdesk module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="eventdesk-uploads-")
os.environ["SECRET_KEY"] = "test-secret-key"

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine, StaticPool, create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from eventdesk.core.security import create_access_token  # noqa: E402
from eventdesk.database.db import Base, get_db  # noqa: E402
from eventdesk.main import app  # noqa: E402
from eventdesk.models.bookings import Booking, BookingStatus  # noqa: E402
from eventdesk.models.events import Event  # noqa: E402
from eventdesk.models.users import User, UserRole  # noqa: E402
from eventdesk.services.images import ImageStore, get_image_store  # noqa: E402

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Give every test a fresh schema."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def image_store(tmp_path) -> ImageStore:
    store = ImageStore(
        str(tmp_path / "uploads"),
        public_base_url=None,
        allowed_extensions=["png", "jpg", "jpeg", "gif", "webp"],
    )
    app.dependency_overrides[get_image_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_image_store, None)


@pytest.fixture
def redis_client(monkeypatch: pytest.MonkeyPatch):
    """Route booking locks to an in-process fake Redis server."""
    server = fakeredis.FakeServer()

    def fake_client():
        return fakeredis.FakeRedis(server=server, decode_responses=True)

    monkeypatch.setattr("eventdesk.services.bookings.get_redis_client", fake_client)
    return fake_client()


# ---------- Users ----------
def _add_user(db: Session, name: str, email: str, role: UserRole) -> User:
    user = User(name=name, email=email, role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def organizer(db_session: Session) -> User:
    return _add_user(db_session, "Olivia Organizer", "olivia@example.com", UserRole.ORGANIZER)


@pytest.fixture
def other_organizer(db_session: Session) -> User:
    return _add_user(db_session, "Oscar Organizer", "oscar@example.com", UserRole.ORGANIZER)


@pytest.fixture
def admin(db_session: Session) -> User:
    return _add_user(db_session, "Ada Admin", "ada@example.com", UserRole.ADMIN)


@pytest.fixture
def attendees(db_session: Session) -> list[User]:
    return [
        _add_user(db_session, f"Attendee {i}", f"attendee{i}@example.com", UserRole.ATTENDEE)
        for i in range(1, 6)
    ]


@pytest.fixture
def auth_headers():
    """Build a bearer Authorization header for a stored user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(user_id=user.user_id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# ---------- Events ----------
@pytest.fixture
def make_event(db_session: Session):
    """Factory inserting an event row directly, bypassing the API."""

    def _make_event(organizer: User | None = None, **fields) -> Event:
        capacity = fields.pop("capacity", 50)
        event = Event(
            title=fields.pop("title", "Sample Event"),
            date=fields.pop("date", datetime(2030, 5, 1, 18, 30)),
            location=fields.pop("location", "Main Hall"),
            price=fields.pop("price", 0),
            capacity=capacity,
            available_seats=fields.pop("available_seats", capacity),
            organizer_id=organizer.user_id if organizer else None,
            **fields,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def add_bookings(db_session: Session):
    """Factory inserting raw booking rows, with no capacity check."""

    def _add_bookings(event: Event, users: list[User], status: str = BookingStatus.CONFIRMED.value):
        bookings = [Booking(event_id=event.event_id, user_id=u.user_id, status=status) for u in users]
        db_session.add_all(bookings)
        db_session.commit()
        return bookings

    return _add_bookings
