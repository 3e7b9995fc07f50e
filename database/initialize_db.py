"""
Database Initialization
Resolves the projects SQLite database, opens resilient connections and
applies the idempotent schema the data access layer relies upon.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Final

from config.settings import get_settings

from .resilient_db import ResilientDB

if TYPE_CHECKING:
    from collections.abc import Callable

LOGGER = logging.getLogger(__name__)

# Declarative schema (idempotent DDLs). Children cascade when a project is deleted.
SCHEMA_DDLS: Final[list[str]] = [
    """
        CREATE TABLE IF NOT EXISTS project (
            project_id INTEGER PRIMARY KEY AUTOINCREMENT,
            project_name VARCHAR(128) NOT NULL,
            estimated_hours DECIMAL(7, 2),
            actual_hours DECIMAL(7, 2),
            difficulty INT,
            notes TEXT
        )
    """,
    """
        CREATE TABLE IF NOT EXISTS category (
            category_id INTEGER PRIMARY KEY AUTOINCREMENT,
            category_name VARCHAR(128) NOT NULL UNIQUE
        )
    """,
    """
        CREATE TABLE IF NOT EXISTS project_category (
            project_id INT NOT NULL,
            category_id INT NOT NULL,
            FOREIGN KEY (project_id) REFERENCES project (project_id) ON DELETE CASCADE,
            FOREIGN KEY (category_id) REFERENCES category (category_id) ON DELETE CASCADE,
            UNIQUE (project_id, category_id)
        )
    """,
    """
        CREATE TABLE IF NOT EXISTS material (
            material_id INTEGER PRIMARY KEY AUTOINCREMENT,
            project_id INT NOT NULL,
            material_name VARCHAR(128) NOT NULL,
            num_required INT,
            cost DECIMAL(7, 2),
            FOREIGN KEY (project_id) REFERENCES project (project_id) ON DELETE CASCADE
        )
    """,
    """
        CREATE TABLE IF NOT EXISTS step (
            step_id INTEGER PRIMARY KEY AUTOINCREMENT,
            project_id INT NOT NULL,
            step_text TEXT NOT NULL,
            step_order INT NOT NULL,
            FOREIGN KEY (project_id) REFERENCES project (project_id) ON DELETE CASCADE
        )
    """,
]


def _ensure_dir(path: Path) -> None:
    """Ensure a directory exists."""
    path.mkdir(parents=True, exist_ok=True)


def _exec_ddl_batch(conn: sqlite3.Connection, ddls: list[str]) -> None:
    """Execute a batch of DDL statements in one transaction."""
    cur = conn.cursor()
    cur.execute("BEGIN")
    try:
        for sql in ddls:
            cur.execute(sql)
    except sqlite3.Error:
        if conn.in_transaction:
            with contextlib.suppress(sqlite3.Error):
                conn.execute("ROLLBACK")
        raise
    cur.execute("COMMIT")


class DatabaseManager:
    """Manages the projects SQLite database file and its connections"""

    def __init__(
        self,
        db_path: Path | str | None = None,
        user_feedback: Callable[[str], None] | None = None,
        timeout_s: float | None = None,
    ):
        settings = get_settings()
        self.db_path = Path(db_path) if db_path is not None else settings.db_path
        self.timeout_s = timeout_s if timeout_s is not None else settings.db_timeout_s
        self.user_feedback = user_feedback or print

    def _setup_schema(self, conn: sqlite3.Connection) -> None:
        """Apply schema DDLs; safe to run on every connection."""
        _exec_ddl_batch(conn, SCHEMA_DDLS)

    def get_projects_connection(self) -> sqlite3.Connection:
        """
        Open a new connection to the projects database.
        The caller owns the connection and must close it.
        """
        _ensure_dir(self.db_path.parent)
        db = ResilientDB(self.db_path, self._setup_schema, self.user_feedback, self.timeout_s)
        return db.connect_with_retry()

    def initialize_database(self) -> None:
        """Create the database file and schema up-front with readable error reporting"""
        try:
            conn = self.get_projects_connection()
            conn.close()
            LOGGER.info("Projects database ready at %s", self.db_path)
        except sqlite3.Error as e:
            self.user_feedback(
                f"[ERROR] Database error: {str(e)}. Please check database file permissions."
            )
            raise
        except PermissionError:
            self.user_feedback("[ERROR] Permission denied. Please check file permissions.")
            raise
