"""Pytest fixtures shared by unit and integration tests.

Provides:
- In-memory port doubles (see fakes.py) and the services built on them
- A SQLite in-memory session factory for the SQLAlchemy repositories
- Sample content and documents

Usage:
    @pytest.mark.asyncio
    async def test_upload(upload_service, storage):
        document = await upload_service.upload_bytes(b"%PDF", "invoice.pdf", 42)
        assert document.object_key in storage.objects
"""

import os
import sys
from pathlib import Path

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from authentication.service import AuthenticationService
from config import Settings
from dependencies import ServiceContainer
from documents.service import DocumentQueryService
from events.idempotency import ProcessedMessageLedger
from models.base import Base
import models  # noqa: F401  registers all tables on Base.metadata
from retention.service import DeletionService
from transfers.service import TransferService
from uploads.service import UploadService

from fakes import (
    InMemoryDocumentRepository,
    InMemoryObjectStorage,
    InMemoryProcessedMessageRepository,
    RecordingPublisher,
)

AUTH_REQUEST_QUEUE = "test.authentication.requested"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        AUTHENTICATION_REQUEST_QUEUE=AUTH_REQUEST_QUEUE,
        S3_BUCKET_NAME="test-bucket",
    )


@pytest.fixture
def repository() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage(bucket="test-bucket")


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def processed_messages() -> InMemoryProcessedMessageRepository:
    return InMemoryProcessedMessageRepository()


@pytest.fixture
def upload_service(repository, storage) -> UploadService:
    return UploadService(repository, storage)


@pytest.fixture
def authentication_service(repository, storage, publisher) -> AuthenticationService:
    return AuthenticationService(repository, storage, publisher, request_queue=AUTH_REQUEST_QUEUE)


@pytest.fixture
def transfer_service(repository, storage) -> TransferService:
    return TransferService(repository, storage)


@pytest.fixture
def deletion_service(repository, storage) -> DeletionService:
    return DeletionService(repository, storage)


@pytest.fixture
def query_service(repository, storage) -> DocumentQueryService:
    return DocumentQueryService(repository, storage)


@pytest.fixture
def ledger(processed_messages) -> ProcessedMessageLedger:
    return ProcessedMessageLedger(processed_messages)


@pytest.fixture
def container(settings, repository, storage, publisher, processed_messages) -> ServiceContainer:
    return ServiceContainer.from_ports(
        settings=settings,
        repository=repository,
        storage=storage,
        publisher=publisher,
        processed_messages=processed_messages,
    )


@pytest.fixture
def session_factory():
    """SQLite in-memory database shared across threads (repositories use an executor)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def pdf_content() -> bytes:
    return b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer\n%%EOF\n"
