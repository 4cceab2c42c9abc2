import os

os.environ["APP_DATABASE_URL"] = "sqlite://"
os.environ["APP_API_KEY"] = "test-api-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import marketplace.models  # noqa: F401
from marketplace.core.database import Base, get_db
from marketplace.main import app
from marketplace.services.image_storage import (
    DatabaseBackend,
    FilesystemBackend,
    ImageStorage,
    get_storage_backend,
)

API_KEY = "test-api-key"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR-test-payload"


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def images_dir(tmp_path):
    return tmp_path / "images"


@pytest.fixture
def fs_storage(db_session, images_dir):
    return ImageStorage(db_session, FilesystemBackend(images_dir))


@pytest.fixture
def db_storage(db_session):
    return ImageStorage(db_session, DatabaseBackend())


@pytest.fixture(params=["filesystem", "database"])
def storage(request, fs_storage, db_storage):
    return fs_storage if request.param == "filesystem" else db_storage


@pytest.fixture
def client(db_session, images_dir):
    def _get_db():
        yield db_session

    backend = FilesystemBackend(images_dir)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage_backend] = lambda: backend
    with TestClient(app, headers={"X-API-Key": API_KEY}) as test_client:
        yield test_client
    app.dependency_overrides.clear()
