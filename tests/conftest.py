import asyncio
import os
import threading

os.environ.setdefault("DATABASE_URI", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from core.database import Database
from models.project import ProjectStatus
from repository.project_repository import ProjectRepository
from repository.user_repository import UserRepository
from schema.user_schema import UpsertUser
from services.identity_service import MockGoogleIdentityProvider, Principal
from services.import_service import ImportStatusEngine

ALICE = Principal(subject="sub-alice", email="alice@example.com", name="Alice")
BOB = Principal(subject="sub-bob", email="bob@example.com", name="Bob")
TOKENS = {"token-alice": ALICE, "token-bob": BOB}


class FakeClock:
    """Stand-in for asyncio.sleep that advances a virtual clock instantly."""

    def __init__(self, on_sleep=None):
        self.now = 0.0
        self.delays = []
        self.on_sleep = on_sleep

    async def sleep(self, delay):
        self.delays.append(delay)
        self.now += delay
        if self.on_sleep is not None:
            self.on_sleep(len(self.delays))


class SteppedClock:
    """Sleep that only returns once the test thread releases a step."""

    def __init__(self):
        self._permits = threading.Semaphore(0)

    async def sleep(self, delay):
        while not self._permits.acquire(blocking=False):
            await asyncio.sleep(0.005)

    def step(self):
        self._permits.release()


class RecordingProjectRepository(ProjectRepository):
    """Remembers every successful write as (status, result_url)."""

    def __init__(self, session_factory, clock=None):
        super().__init__(session_factory)
        self.clock = clock
        self.writes = []

    def update(self, id, fields):
        row = super().update(id, fields)
        if row is not None:
            self.writes.append((row.status, row.result_url, self.clock.now if self.clock else None))
        return row


class StubImportEngine:
    def __init__(self):
        self.started = []
        self.cancelled = []

    def start_import(self, project):
        self.started.append(project.id)

    def cancel(self, project_id):
        self.cancelled.append(project_id)
        return True

    async def shutdown(self):
        return None


@pytest.fixture
def db(tmp_path):
    # file backed so engine writes from worker threads get their own connection
    database = Database(f"sqlite:///{tmp_path / 'repo_importer.db'}")
    database.create_database()
    yield database
    database.drop_database()


@pytest.fixture
def user_repository(db):
    return UserRepository(db.session)


@pytest.fixture
def project_repository(db):
    return ProjectRepository(db.session)


@pytest.fixture
def owner(user_repository):
    return user_repository.create(
        UpsertUser(email=ALICE.email, name=ALICE.name, google_id=ALICE.subject)
    )


@pytest.fixture
def make_project(project_repository, owner):
    def _make(display_name="widget", status=ProjectStatus.PENDING.value):
        return project_repository.create(
            {
                "owner_id": owner.id,
                "source_url": f"https://github.com/acme/{display_name}",
                "display_name": display_name,
                "status": status,
            }
        )

    return _make


@pytest.fixture
def import_engine_stub():
    return StubImportEngine()


def serve(db, import_engine):
    from main import app, container

    container.db.override(providers.Object(db))
    container.import_engine.override(providers.Object(import_engine))
    container.identity_provider.override(providers.Object(MockGoogleIdentityProvider(tokens=TOKENS)))
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.reset_override()


@pytest.fixture
def client(db, import_engine_stub):
    yield from serve(db, import_engine_stub)


@pytest.fixture
def stepped_clock():
    return SteppedClock()


@pytest.fixture
def live_engine(db, stepped_clock):
    return ImportStatusEngine(ProjectRepository(db.session), sleep=stepped_clock.sleep)


@pytest.fixture
def live_client(db, live_engine):
    yield from serve(db, live_engine)


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    response = client.post("/api/auth/google", json={"token": "token-alice"})
    assert response.status_code == 200
    return auth("token-alice")


@pytest.fixture
def bob(client):
    response = client.post("/api/auth/google", json={"token": "token-bob"})
    assert response.status_code == 200
    return auth("token-bob")
