"""
Shared fixtures and test configuration for database tests
"""

from decimal import Decimal
import sqlite3
import uuid

import pytest

from database.initialize_db import DatabaseManager
from database.projects_db import ProjectsDatabase
from database.projects_service import ProjectService
from models.project import Project


# Test data factory functions
def create_test_project(name: str = "Test Project", **kwargs) -> Project:
    """Factory function to create unsaved test projects"""
    defaults = {
        "project_name": name,
        "estimated_hours": Decimal("4.50"),
        "actual_hours": None,
        "difficulty": 2,
        "notes": f"Notes for {name}",
    }
    defaults.update(kwargs)
    return Project(**defaults)


def count_projects(conn: sqlite3.Connection) -> int:
    """Number of rows currently in the project table"""
    return conn.execute("SELECT COUNT(*) FROM project").fetchone()[0]


@pytest.fixture
def db_manager(tmp_path):
    """Real database manager on a fresh SQLite file per test"""
    manager = DatabaseManager(
        db_path=tmp_path / f"projects_{uuid.uuid4().hex[:8]}.db",
        user_feedback=lambda _msg: None,
    )
    manager.initialize_database()
    return manager


@pytest.fixture
def projects_connection(db_manager):
    """Side connection for arranging and inspecting rows directly"""
    conn = db_manager.get_projects_connection()
    yield conn
    conn.close()


@pytest.fixture
def projects_db(db_manager):
    """Data access object bound to the per-test database"""
    return ProjectsDatabase(db_manager)


@pytest.fixture
def project_service(projects_db):
    """Service bound to the per-test database"""
    return ProjectService(projects_db)


@pytest.fixture
def sample_project():
    """The 'Build deck' project used throughout the scenarios"""
    return Project(
        project_name="Build deck",
        estimated_hours=Decimal("10.00"),
        actual_hours=None,
        difficulty=3,
        notes="use cedar",
    )


@pytest.fixture
def make_project():
    """Factory fixture for unsaved projects"""
    return create_test_project


@pytest.fixture
def project_count(projects_connection):
    """Callable returning the current project row count"""
    return lambda: count_projects(projects_connection)


@pytest.fixture
def seed_children(projects_connection):
    """Attach categories, materials and steps to a stored project id"""

    def _seed(project_id: int) -> None:
        conn = projects_connection
        conn.execute("INSERT OR IGNORE INTO category (category_name) VALUES ('Outdoors')")
        conn.execute("INSERT OR IGNORE INTO category (category_name) VALUES ('Woodworking')")
        conn.execute(
            """
            INSERT INTO project_category (project_id, category_id)
            SELECT ?, category_id FROM category
            """,
            (project_id,),
        )
        conn.executemany(
            "INSERT INTO material (project_id, material_name, num_required, cost) VALUES (?, ?, ?, ?)",
            [
                (project_id, "Cedar board", 12, "18.25"),
                (project_id, "Deck screws", 200, "0.10"),
            ],
        )
        conn.executemany(
            "INSERT INTO step (project_id, step_text, step_order) VALUES (?, ?, ?)",
            [
                (project_id, "Stain the boards", 2),
                (project_id, "Cut the boards", 1),
            ],
        )

    return _seed


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with markers"""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
