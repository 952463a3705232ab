"""
Shared pytest fixtures for backend tests.
Each test gets its own SQLite file with the scheduler schema.
"""
import pytest
import sqlite3
import sys
import os
from datetime import date

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SqliteTaskStore
from lifecycle import TaskLifecycle

# Fixed "today" used by lifecycle and API tests
TODAY = date(2024, 1, 10)


@pytest.fixture
def test_db(tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because the store opens a new connection per operation.
    """
    db_path = str(tmp_path / "test.db")

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE scheduler (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date CHAR(8) NOT NULL DEFAULT '',
            title VARCHAR(128) NOT NULL DEFAULT '',
            comment TEXT NOT NULL DEFAULT '',
            repeat VARCHAR(128) NOT NULL DEFAULT ''
        );

        CREATE INDEX idx_date ON scheduler (date);
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def store(test_db):
    return SqliteTaskStore(test_db)


@pytest.fixture
def lifecycle(store):
    return TaskLifecycle(store)


@pytest.fixture
def app_client(test_db, tmp_path, monkeypatch):
    """
    Create a test client for the FastAPI app.
    Skips alembic migrations and pins "today" to TODAY.
    """
    from fastapi.testclient import TestClient
    import main
    from config import Settings

    # Skip alembic in tests - tables already created by test_db fixture
    monkeypatch.setattr(main, "init_db", lambda db_path: None)

    web_dir = tmp_path / "web"
    web_dir.mkdir()
    (web_dir / "index.html").write_text("<h1>Scheduler</h1>")

    app = main.create_app(Settings(db_file=test_db, web_dir=str(web_dir)))
    app.dependency_overrides[main.get_today] = lambda: TODAY

    with TestClient(app) as client:
        yield client
