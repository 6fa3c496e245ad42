"""
Pytest configuration and fixtures for VacantCourt backend tests.

Every test gets its own SQLite database file; the store, app and fake email dispatcher
are built on top of it.
"""
import os

# Module-level settings in vacantcourt.config read these at import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFY_JOB_ENABLED", "false")

import time
from pathlib import Path
from typing import Generator

import jwt
import pytest

from vacantcourt.config import Settings
from vacantcourt.core.errors import EmailDispatchError
from vacantcourt.db.base import Base
from vacantcourt.db.session import make_engine, make_session_factory
from vacantcourt.models import Facility, NotificationRequest, SubCourt, UserAccount
from vacantcourt.services.store import SqlFacilityStore

JWT_SECRET = "test-secret-0123456789abcdef0123456789abcdef"
SITE_BASE_URL = "https://vacantcourt.test"


# ============================================================================
# Fakes
# ============================================================================


class FakeDispatcher:
    """Records every send; raises EmailDispatchError for addresses in fail_for."""

    provider_id = "fake"

    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = set(fail_for or ())
        self.sent: list[tuple[str, dict[str, str]]] = []
        self.attempts: list[str] = []

    def send(self, to_email: str, template_params: dict[str, str]) -> None:
        self.attempts.append(to_email)
        if to_email in self.fail_for:
            raise EmailDispatchError(f"rejected {to_email}")
        self.sent.append((to_email, dict(template_params)))

    @property
    def recipients(self) -> list[str]:
        return [to for to, _ in self.sent]


# ============================================================================
# Database / store fixtures
# ============================================================================


@pytest.fixture
def engine(tmp_path: Path):
    eng = make_engine(f"sqlite:///{tmp_path / 'vacantcourt_test.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def store(session_factory) -> SqlFacilityStore:
    return SqlFacilityStore(session_factory)


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def add_facility(session_factory):
    """
    Insert a facility. courts is a list of dicts: {"name", "status", "is_configured"}.

    Returns the facility id.
    """

    def _add(court_id: str, name: str = "Riverside Tennis", courts: list[dict] | None = None, owner_id: str | None = None) -> str:
        db = session_factory()
        try:
            facility = Facility(id=court_id, name=name, owner_id=owner_id, amenities=["Lights"], images=[])
            for i, c in enumerate(courts or []):
                facility.courts.append(
                    SubCourt(
                        name=c.get("name", f"Court {i + 1}"),
                        position=i,
                        status=c.get("status", "in-use"),
                        is_configured=c.get("is_configured", True),
                        surface=c.get("surface"),
                    )
                )
            db.add(facility)
            db.commit()
            return court_id
        finally:
            db.close()

    return _add


@pytest.fixture
def add_request(session_factory):
    """Insert a notification request row directly (bypassing validation). Returns its id."""

    def _add(court_id: str | None, user_email: str | None, user_id: str = "user-1", request_id: str | None = None) -> str:
        db = session_factory()
        try:
            row = NotificationRequest(court_id=court_id, user_email=user_email, user_id=user_id, court_name="x")
            if request_id:
                row.id = request_id
            db.add(row)
            db.commit()
            return row.id
        finally:
            db.close()

    return _add


@pytest.fixture
def add_user(session_factory):
    def _add(uid: str, email: str) -> str:
        db = session_factory()
        try:
            db.add(UserAccount(id=uid, email=email.lower()))
            db.commit()
            return uid
        finally:
            db.close()

    return _add


@pytest.fixture
def request_ids(session_factory):
    """Current notification request ids in the database."""

    def _ids() -> set[str]:
        db = session_factory()
        try:
            return {r.id for r in db.query(NotificationRequest).all()}
        finally:
            db.close()

    return _ids


# ============================================================================
# Settings / auth fixtures
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        site_base_url=SITE_BASE_URL,
        email_provider="emailjs",
        emailjs_service_id="service_test",
        emailjs_template_id="template_test",
        emailjs_public_key="public_test",
        emailjs_private_key="private_test",
        auth_jwt_secret=JWT_SECRET,
        notify_job_enabled=False,
    )


def make_token(uid: str, email: str | None = None, *, secret: str = JWT_SECRET, expires_in: int = 3600) -> str:
    claims = {"sub": uid, "exp": int(time.time()) + expires_in}
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def auth_header():
    def _header(uid: str, email: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(uid, email)}"}

    return _header


@pytest.fixture
def client(test_settings, session_factory) -> Generator:
    from fastapi.testclient import TestClient

    from vacantcourt.main import create_app

    app = create_app(test_settings, session_factory)
    with TestClient(app) as c:
        yield c
