"""
Console entry point: ``python -m cli`` or the ``projects-app`` script.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from config.settings import get_settings, load_env_files
from database.initialize_db import DatabaseManager
from database.projects_db import ProjectsDatabase
from database.projects_service import ProjectService
from utils.logger import Logger
from utils.sentry import init_sentry
from utils.structured_logging import setup_logging

from .projects_app import ProjectsApp


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projects-app", description="Track DIY projects from the console."
    )
    parser.add_argument("--db", type=Path, help="SQLite database file (overrides PROJECTS_DB_PATH)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    load_env_files()
    settings = get_settings()
    if settings.log_json:
        setup_logging(log_dir=settings.log_dir, level=settings.log_level)
    logger = Logger()
    if init_sentry(settings):
        logger.info("Sentry error tracking enabled")

    manager = DatabaseManager(db_path=args.db or settings.db_path)
    manager.initialize_database()

    service = ProjectService(ProjectsDatabase(manager))
    ProjectsApp(service).process_user_selections()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
