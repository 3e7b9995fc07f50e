"""
Error types raised by the projects data access and service layers.

These are intentionally simple and typed for clear error handling paths.
"""

from __future__ import annotations


class DbError(Exception):
    """
    Raised when a connection, statement or transaction fails.

    The enclosing transaction has always been rolled back by the time this
    is raised, so no partial write survives.

    Attributes:
        cause: The underlying driver exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause: BaseException | None = cause


class ProjectNotFoundError(Exception):
    """
    Raised when a project targeted by id does not exist.

    Attributes:
        project_id: The id that was requested.
    """

    def __init__(self, project_id: int | None) -> None:
        super().__init__(f"Project with ID={project_id} does not exist.")
        self.project_id: int | None = project_id
