"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from classroom_api.app.api.deps import memory_database  # noqa: E402
from classroom_api.app.core.config import settings  # noqa: E402
from classroom_api.app.core.db import get_connection, init_db  # noqa: E402
from classroom_api.app.repositories.memory import (  # noqa: E402
    MemoryDatabase,
    MemoryStudentStore,
    MemoryTeacherStore,
)
from classroom_api.app.repositories.sqlite import (  # noqa: E402
    SQLiteStudentStore,
    SQLiteTeacherStore,
)
from classroom_api.app.services.teacher_service import TeacherService  # noqa: E402


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point the app at a fresh SQLite file with the schema applied"""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "classroom.db"))
    monkeypatch.setattr(settings, "storage_backend", "sqlite")
    init_db()
    return tmp_path / "classroom.db"


@pytest.fixture
def sqlite_conn(sqlite_db):
    """Open connection on the test database, closed after the test"""
    conn = get_connection()
    yield conn
    conn.close()


@pytest.fixture
def memory_db():
    return MemoryDatabase()


@pytest.fixture(params=["memory", "sqlite"])
def service(request):
    """TeacherService running against each storage backend"""
    if request.param == "memory":
        db = request.getfixturevalue("memory_db")
        return TeacherService(MemoryTeacherStore(db), MemoryStudentStore(db))
    conn = request.getfixturevalue("sqlite_conn")
    return TeacherService(SQLiteTeacherStore(conn), SQLiteStudentStore(conn))


@pytest.fixture
def client(sqlite_db):
    """Test client for an app backed by a fresh SQLite file"""
    from classroom_api.app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def memory_client(monkeypatch):
    """Test client for an app using the in-memory backend"""
    from classroom_api.app.main import create_app

    monkeypatch.setattr(settings, "storage_backend", "memory")
    memory_database.clear()
    with TestClient(create_app()) as test_client:
        yield test_client
    memory_database.clear()
