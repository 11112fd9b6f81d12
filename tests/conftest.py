from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from town_hall.api.v1 import dependencies as api_dependencies
from town_hall.core.security import create_access_token
from town_hall.db.session import Base
from town_hall.db.session import get_db as app_get_session
from town_hall.db.time import utcnow
from town_hall.main import app as fastapi_app
from town_hall.models import Question, VoteEntry
from town_hall.services.direction import VoteDirection
from town_hall.services.mail import MailMessage

TEST_DB_URL = "sqlite://"

ALICE = {"user_id": "user-alice", "name": "alice@example.com", "email": "alice@example.com"}
BOB = {"user_id": "user-bob", "name": "bob@example.com", "email": "bob@example.com"}


class RecordingMailTransport:
    """Keeps every outbound message for inspection instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[MailMessage] = []

    def send(self, message: MailMessage) -> None:
        self.sent.append(message)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Services commit, so each test clears every table on the way out.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def mail_transport(app: FastAPI) -> Iterator[RecordingMailTransport]:
    """Capture outbound mail instead of sending it."""
    transport = RecordingMailTransport()
    app.dependency_overrides[api_dependencies.get_mail_transport_dep] = lambda: transport
    try:
        yield transport
    finally:
        app.dependency_overrides.pop(api_dependencies.get_mail_transport_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _headers(identity: dict[str, str]) -> dict[str, str]:
    token = create_access_token(
        identity["user_id"],
        name=identity["name"],
        email=identity["email"],
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_token() -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _headers(ALICE)


@pytest.fixture()
def other_auth_token() -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _headers(BOB)


@pytest.fixture()
def make_question(db_session: Session) -> Callable[..., Question]:
    """Return a factory persisting questions directly through the ORM."""

    def _make(
        content: str = "Test question content",
        *,
        author_id: str = ALICE["user_id"],
        author_name: str | None = ALICE["name"],
        anonymous: bool = False,
        timestamp: datetime | None = None,
        score: int = 0,
    ) -> Question:
        question = Question(
            content=content,
            author_id=author_id,
            author_name=None if anonymous else author_name,
            anonymous=anonymous,
            timestamp=timestamp or utcnow(),
            score=score,
        )
        db_session.add(question)
        db_session.commit()
        return question

    return _make


@pytest.fixture()
def test_question(make_question: Callable[..., Question]) -> Question:
    """Create a baseline question authored by the primary test user."""
    return make_question()


@pytest.fixture()
def old_question(make_question: Callable[..., Question]) -> Question:
    """A question posted well outside the digest window."""
    return make_question("Old question", timestamp=utcnow() - timedelta(days=3))


@pytest.fixture()
def record_vote(db_session: Session) -> Callable[[Question, str, VoteDirection], None]:
    """Return a helper writing a vote record without touching the score."""

    def _record(question: Question, user_id: str, vote: VoteDirection) -> None:
        db_session.add(VoteEntry(question_id=question.id, user_id=user_id, vote=vote))
        db_session.commit()

    return _record
