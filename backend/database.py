import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config

from errors import StorageFailure, TaskNotFound
from models import Task

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent


def init_db(db_path: str) -> None:
    """Bring the database at db_path up to the latest schema via Alembic migrations."""
    cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    # Keep the application's logging configuration
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")
    logger.info("Database ready at %s", db_path)


def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        date=row["date"],
        title=row["title"],
        comment=row["comment"] or "",
        repeat=row["repeat"] or "",
    )


class SqliteTaskStore:
    """
    SQLite-backed task store.
    Each call opens its own connection, so one store can serve concurrent requests.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    @contextmanager
    def _connect(self):
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
        except sqlite3.Error as e:
            raise StorageFailure(str(e)) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            raise StorageFailure(str(e)) from e
        finally:
            conn.close()

    def create(self, task: Task) -> int:
        with self._connect() as conn:
            # Connection as context manager commits on success, rolls back on error
            with conn:
                cursor = conn.execute(
                    "INSERT INTO scheduler (date, title, comment, repeat) VALUES (?, ?, ?, ?)",
                    (task.date, task.title, task.comment, task.repeat),
                )
                task_id = cursor.lastrowid
            if task_id is None:
                raise StorageFailure("insert did not return a task id")
            return task_id

    def get(self, task_id: int) -> Task:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, date, title, comment, repeat FROM scheduler WHERE id = ?",
                (task_id,),
            ).fetchone()
        if row is None:
            raise TaskNotFound(task_id)
        return _row_to_task(row)

    def update(self, task: Task) -> None:
        with self._connect() as conn:
            with conn:
                cursor = conn.execute(
                    "UPDATE scheduler SET date = ?, title = ?, comment = ?, repeat = ? WHERE id = ?",
                    (task.date, task.title, task.comment, task.repeat, task.id),
                )
            if cursor.rowcount == 0:
                raise TaskNotFound(task.id)

    def delete(self, task_id: int) -> None:
        with self._connect() as conn:
            with conn:
                conn.execute("DELETE FROM scheduler WHERE id = ?", (task_id,))

    def list_all(self, limit: Optional[int] = None) -> list[Task]:
        query = "SELECT id, date, title, comment, repeat FROM scheduler ORDER BY date, id"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_task(row) for row in rows]
