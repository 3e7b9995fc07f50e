"""
Projects Database Access
Parameterized CRUD for the project table and its category/material/step
children. Every public operation runs on its own connection inside one
explicit transaction: BEGIN, then COMMIT on success or ROLLBACK and DbError
on any failure.
"""

from __future__ import annotations

import dataclasses
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from models.project import Category, Material, Project, Step
from utils.logger import Logger

from .exceptions import DbError

# Type aliases for clarity
Connection = sqlite3.Connection

PROJECT_COLUMNS = "project_id, project_name, estimated_hours, actual_hours, difficulty, notes"


class DBManagerProtocol(Protocol):
    """Protocol for database manager expected by ProjectsDatabase."""

    def get_projects_connection(self) -> sqlite3.Connection: ...


class ProjectsDatabase:
    """Data access object for projects"""

    def __init__(self, db_manager: DBManagerProtocol) -> None:
        """Initialize with database manager reference"""
        self.db_manager: DBManagerProtocol = db_manager
        self.logger = Logger()

    def _get_connection(self) -> Connection:
        """Get database connection"""
        return self.db_manager.get_projects_connection()

    @staticmethod
    def _log_extra(operation: str, project_id: int | None = None) -> dict[str, Any]:
        """Structured fields attached to every DAO log record."""
        return {"operation": operation, "project_id": project_id}

    @contextmanager
    def _transaction(
        self, operation: str, project_id: int | None = None
    ) -> Iterator[Connection]:
        """
        Scope one connection and one transaction around a block.

        Commits when the block finishes, rolls back and raises DbError
        (chained to the cause) when it raises. The connection is always closed.
        """
        extra = self._log_extra(operation, project_id)
        try:
            conn = self._get_connection()
        except (sqlite3.Error, OSError, RuntimeError) as e:
            self.logger.error(f"{operation}: could not open connection: {e}", extra=extra)
            raise DbError(f"{operation} failed: {e}", cause=e) from e

        try:
            conn.execute("BEGIN")
            yield conn
            conn.execute("COMMIT")
        except Exception as e:
            self._rollback(conn, operation, project_id)
            self.logger.error(f"{operation} rolled back: {e}", extra=extra)
            raise DbError(f"{operation} failed: {e}", cause=e) from e
        finally:
            conn.close()

    def _rollback(self, conn: Connection, operation: str, project_id: int | None = None) -> None:
        """Roll back if a transaction is still open on the connection."""
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            # The original failure is the one worth reporting
            self.logger.warning(
                f"{operation}: rollback failed: {e}",
                extra=self._log_extra(operation, project_id),
            )

    # ------------- Public API -------------

    def fetch_all_projects(self) -> list[Project]:
        """Return every project ordered by name, without child collections."""
        with self._transaction("fetch_all_projects") as conn:
            cursor = conn.execute(f"SELECT {PROJECT_COLUMNS} FROM project ORDER BY project_name")
            return [Project.from_row(row) for row in cursor]

    def insert_project(self, project: Project) -> Project:
        """
        Insert a new project row.

        Args:
            project: Project to insert; its project_id is ignored.

        Returns:
            A copy of the project carrying the store-generated project_id.
            The argument itself is left untouched.
        """
        with self._transaction("insert_project") as conn:
            params = project.to_db_dict()
            params.pop("project_id")
            cursor = conn.execute(
                """
                INSERT INTO project
                    (project_name, estimated_hours, actual_hours, difficulty, notes)
                VALUES
                    (:project_name, :estimated_hours, :actual_hours, :difficulty, :notes)
                """,
                params,
            )
            project_id = cursor.lastrowid
        self.logger.info(
            f"Inserted project {project_id}: {project.project_name}",
            extra=self._log_extra("insert_project", project_id),
        )
        return dataclasses.replace(project, project_id=project_id)

    def fetch_by_project_id(self, project_id: int) -> Project | None:
        """
        Fetch one project with materials, steps and categories loaded.

        Returns:
            The project, or None when no row has this id. Query failures
            (including while loading children) raise DbError instead.
        """
        with self._transaction("fetch_by_project_id", project_id) as conn:
            row = conn.execute(
                f"SELECT {PROJECT_COLUMNS} FROM project WHERE project_id = ?",
                (project_id,),
            ).fetchone()
            if row is None:
                return None

            project = Project.from_row(row)
            project.materials.extend(self._fetch_materials_for_project(conn, project_id))
            project.steps.extend(self._fetch_steps_for_project(conn, project_id))
            project.categories.extend(self._fetch_categories_for_project(conn, project_id))
            return project

    def modify_project_details(self, project: Project) -> bool:
        """Update every mutable field by id; True only if exactly one row changed."""
        with self._transaction("modify_project_details", project.project_id) as conn:
            cursor = conn.execute(
                """
                UPDATE project SET
                    project_name = :project_name,
                    estimated_hours = :estimated_hours,
                    actual_hours = :actual_hours,
                    difficulty = :difficulty,
                    notes = :notes
                WHERE project_id = :project_id
                """,
                project.to_db_dict(),
            )
            modified = cursor.rowcount == 1
        if modified:
            self.logger.info(
                f"Updated project {project.project_id}",
                extra=self._log_extra("modify_project_details", project.project_id),
            )
        return modified

    def delete_project(self, project_id: int) -> bool:
        """Delete by id; True only if exactly one row was removed."""
        with self._transaction("delete_project", project_id) as conn:
            cursor = conn.execute("DELETE FROM project WHERE project_id = ?", (project_id,))
            deleted = cursor.rowcount == 1
        if deleted:
            self.logger.info(
                f"Deleted project {project_id}",
                extra=self._log_extra("delete_project", project_id),
            )
        return deleted

    # ------------- Child fetches (caller's transaction) -------------

    @staticmethod
    def _fetch_categories_for_project(conn: Connection, project_id: int) -> list[Category]:
        cursor = conn.execute(
            """
            SELECT c.category_id, c.category_name
            FROM category c
            JOIN project_category pc USING (category_id)
            WHERE pc.project_id = ?
            ORDER BY c.category_id
            """,
            (project_id,),
        )
        return [Category.from_row(row) for row in cursor]

    @staticmethod
    def _fetch_steps_for_project(conn: Connection, project_id: int) -> list[Step]:
        cursor = conn.execute(
            """
            SELECT step_id, project_id, step_text, step_order
            FROM step
            WHERE project_id = ?
            ORDER BY step_order, step_id
            """,
            (project_id,),
        )
        return [Step.from_row(row) for row in cursor]

    @staticmethod
    def _fetch_materials_for_project(conn: Connection, project_id: int) -> list[Material]:
        cursor = conn.execute(
            """
            SELECT material_id, project_id, material_name, num_required, cost
            FROM material
            WHERE project_id = ?
            ORDER BY material_id
            """,
            (project_id,),
        )
        return [Material.from_row(row) for row in cursor]
