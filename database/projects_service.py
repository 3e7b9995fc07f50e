"""
ProjectService - pass-through between the menu and the data access layer.
Its one job is turning "no such row" answers into ProjectNotFoundError.
"""

from __future__ import annotations

from typing import NoReturn

from models.project import Project
from utils.logger import Logger

from .exceptions import ProjectNotFoundError
from .initialize_db import DatabaseManager
from .projects_db import ProjectsDatabase


class ProjectService:
    """Service operations over projects; storage errors pass through unchanged."""

    def __init__(self, projects_db: ProjectsDatabase | None = None):
        self.logger = Logger()
        self.projects_db = projects_db or ProjectsDatabase(DatabaseManager())

    def add_project(self, project: Project) -> Project:
        """Insert a project and return it with its generated id."""
        return self.projects_db.insert_project(project)

    def fetch_all_projects(self) -> list[Project]:
        """Return all projects ordered by name."""
        return self.projects_db.fetch_all_projects()

    def fetch_project_by_id(self, project_id: int) -> Project:
        """
        Return the project with its materials, steps and categories.

        Raises:
            ProjectNotFoundError: if no project has this id.
        """
        project = self.projects_db.fetch_by_project_id(project_id)
        if project is None:
            self._not_found("fetch_project_by_id", project_id)
        return project

    def modify_project_details(self, project: Project) -> None:
        """
        Overwrite the stored project's fields.

        Raises:
            ProjectNotFoundError: if no project has project.project_id.
        """
        if not self.projects_db.modify_project_details(project):
            self._not_found("modify_project_details", project.project_id)

    def delete_project(self, project_id: int) -> None:
        """
        Delete a project by id.

        Raises:
            ProjectNotFoundError: if no project has this id.
        """
        if not self.projects_db.delete_project(project_id):
            self._not_found("delete_project", project_id)

    def _not_found(self, operation: str, project_id: int | None) -> NoReturn:
        self.logger.warning(
            f"{operation}: project {project_id} not found",
            extra={"operation": operation, "project_id": project_id},
        )
        raise ProjectNotFoundError(project_id)
