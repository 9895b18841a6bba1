"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite database, recording connections, fixed clocks,
fake translation providers, fake S3 client, wired services
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from chatrelay.api.deps.container import RelayContainer
from chatrelay.api.main import create_app
from chatrelay.application.services.file_service import FileService
from chatrelay.application.services.message_service import MessageService
from chatrelay.boundary.aws.s3_client import S3FileStore
from chatrelay.boundary.db.connection import create_tables
from chatrelay.configs import Settings
from chatrelay.configs.database import DatabaseSettings
from chatrelay.configs.relay import RelaySettings
from chatrelay.configs.storage import StorageSettings
from chatrelay.configs.translation import TranslationSettings
from chatrelay.core.broadcast import BroadcastCoordinator
from chatrelay.core.exceptions import ProviderError
from chatrelay.core.identity import IdentityAssigner
from chatrelay.core.session_registry import SessionRegistry
from chatrelay.core.translation.cache import InMemoryTranslationCache

T0 = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now = self.now + delta
        return self.now


class FakeConnection:
    """Connection that records every event queued on it."""

    def __init__(self, connection_id: str | None = None) -> None:
        self.connection_id = connection_id or uuid.uuid4().hex
        self.events: list[tuple[str, Any]] = []

    def send(self, event: str, data: Any) -> None:
        self.events.append((event, data))

    def of(self, event: str) -> list[Any]:
        return [data for name, data in self.events if name == event]

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class FakeProvider:
    """Translation provider returning a canned answer or raising."""

    def __init__(self, name: str, result: str | None = None, error: Exception | None = None) -> None:
        self.name = name
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str, str | None]] = []

    async def translate(self, text: str, target_lang: str, tone: str | None = None) -> str:
        self.calls.append((text, target_lang, tone))
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else f"[{target_lang}] {text}"


class FakeToneClassifier:
    def __init__(self, label: str = "friendly", error: Exception | None = None) -> None:
        self.name = "fake-tone"
        self.label = label
        self.error = error
        self.calls = 0

    async def classify(self, text: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.label


class FakeS3Client:
    """Stand-in for a boto3 S3 client recording uploads and deletions."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        if self.fail_upload:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        self.objects[key] = fileobj.read()

    def delete_object(self, Bucket, Key):
        if self.fail_delete:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "DeleteObject")
        self.deleted.append(Key)
        self.objects.pop(Key, None)


class FirstChoiceRandom:
    """Random source that always picks the first element."""

    def choice(self, seq):
        return seq[0]


def failing_provider(name: str) -> FakeProvider:
    return FakeProvider(name, error=ProviderError(f"{name} unavailable", provider=name))


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
async def async_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine sharing one connection through StaticPool
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker:
    return async_sessionmaker(async_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Provide a session on the in-memory database.

    Yields:
        AsyncSession: Test database session, rolled back afterwards
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def relay_settings() -> RelaySettings:
    return RelaySettings(
        message_ttl_seconds=3600,
        history_window=20,
        max_message_length=500,
        sweep_enabled=False,
    )


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings(
        bucket="test-bucket",
        region="us-east-1",
        public_base_url="https://cdn.example.com",
        max_file_size_bytes=1024,
        allowed_mime_types=["image/png", "text/plain"],
    )


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def blob_store(fake_s3) -> S3FileStore:
    return S3FileStore(
        bucket="test-bucket",
        region="us-east-1",
        public_base_url="https://cdn.example.com",
        s3_client=fake_s3,
    )


@pytest.fixture
def message_service(session_factory) -> MessageService:
    return MessageService(session_factory)


@pytest.fixture
def file_service(session_factory, blob_store, storage_settings, message_service) -> FileService:
    return FileService(session_factory, blob_store, storage_settings, message_service)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def assigner(registry) -> IdentityAssigner:
    return IdentityAssigner(registry, max_attempts=10, rng=FirstChoiceRandom())


@pytest.fixture
def coordinator(registry, assigner, message_service, file_service, relay_settings, clock) -> BroadcastCoordinator:
    return BroadcastCoordinator(
        registry,
        assigner,
        message_service,
        relay_settings,
        file_service=file_service,
        clock=clock,
    )


def build_container(fake_s3: FakeS3Client, providers=None) -> RelayContainer:
    """
    Wire a relay over in-memory SQLite with fake collaborators.

    The engine connects lazily, so tables are created by the app lifespan
    on the TestClient's event loop.
    """
    settings = Settings(
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        relay=RelaySettings(message_ttl_seconds=3600, history_window=20, sweep_enabled=False),
        translation=TranslationSettings(cache_backend="memory"),
        storage=StorageSettings(
            bucket="test-bucket",
            public_base_url="https://cdn.example.com",
            max_file_size_bytes=1024,
            allowed_mime_types=["image/png", "text/plain"],
        ),
    )
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    blob_store = S3FileStore(
        bucket="test-bucket",
        public_base_url="https://cdn.example.com",
        s3_client=fake_s3,
    )
    return RelayContainer.from_settings(
        settings,
        engine=engine,
        blob_store=blob_store,
        providers=providers if providers is not None else [FakeProvider("gemini")],
        translation_cache=InMemoryTranslationCache(),
    )


@pytest.fixture
def api_container(fake_s3) -> RelayContainer:
    return build_container(fake_s3)


@pytest.fixture
def client(api_container):
    """
    Provide a TestClient running the app lifespan.

    Yields:
        TestClient: Client bound to a relay on in-memory SQLite
    """
    with TestClient(create_app(api_container)) as test_client:
        yield test_client
