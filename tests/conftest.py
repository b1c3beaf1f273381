import os
import shutil
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from core.database import Base, get_db

# Ensure models are registered with SQLAlchemy metadata
import models.incident  # noqa: F401


@pytest.fixture(scope="session")
def upload_root(tmp_path_factory):
    path = tmp_path_factory.mktemp("uploads")
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("UPLOAD_DIR", str(path))
        yield path


@pytest.fixture(scope="session")
def incident_app(upload_root):
    # main mounts /uploads on UPLOAD_DIR at import, so import it once the session directory is set
    from main import app
    return app


@pytest.fixture(scope="function")
def upload_dir(upload_root):
    yield upload_root
    for child in upload_root.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest.fixture(scope="function")
def db_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(incident_app, db_session, upload_dir):
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    incident_app.dependency_overrides[get_db] = _override_get_db

    with TestClient(incident_app) as test_client:
        yield test_client

    incident_app.dependency_overrides.clear()
