"""Projects Tracker settings.

Env-backed runtime settings:

- PROJECTS_ENV: "dev" or "prod" (default: dev)
- PROJECTS_USER_DATA: base directory for the database and logs
  default: XDG data home (or LOCALAPPDATA on Windows) + "projects_tracker"
- PROJECTS_DB_PATH: SQLite database file
  default: <user data>/projects.db
- PROJECTS_DB_TIMEOUT_S: seconds to wait on a locked database (float)
  default: 5.0
- PROJECTS_LOG_LEVEL: INFO|DEBUG|WARNING|ERROR (default: INFO)
- PROJECTS_LOG_DIR: logs directory (default: <user data>/logs)
- PROJECTS_LOG_JSON: when true, configure JSON structured logging
  (default: false)
- SENTRY_DSN / SENTRY_DSN_FILE: optional error tracking DSN

Expose get_settings() returning a frozen dataclass with these fields.
Stdlib-only implementation.
"""

from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "projects_tracker"
DB_FILE_NAME = "projects.db"


def _load_env_file(path: Path) -> None:
    """Load KEY=VALUE from a .env-style file into os.environ if not already set."""
    with contextlib.suppress(OSError, UnicodeDecodeError):
        if not path.exists():
            return
        with path.open(encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value


def load_env_files(root: Path | None = None) -> None:
    """
    Load .env (base) and .env.development (when in dev) from the repo root.
    Only sets variables not already present in the environment.
    """
    base = root or Path(__file__).resolve().parents[1]
    _load_env_file(base / ".env")
    env = (os.environ.get("PROJECTS_ENV", "dev") or "dev").strip().lower()
    if env in {"dev", "development"}:
        _load_env_file(base / ".env.development")


def _get_env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


def _parse_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_float(val: str | None, default: float) -> float:
    try:
        return float(str(val)) if val is not None else default
    except ValueError:
        return default


def default_user_data_directory() -> Path:
    """Return the per-user data directory used when nothing is configured."""
    if user_data_path := _get_env("PROJECTS_USER_DATA"):
        return Path(user_data_path).expanduser().resolve()

    if os.name == "nt":
        app_data = os.environ.get("LOCALAPPDATA", os.path.expanduser("~/AppData/Local"))
        return Path(app_data) / APP_DIR_NAME
    xdg_data_home = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
    return Path(xdg_data_home) / APP_DIR_NAME


@dataclass(frozen=True)
class ProjectsSettings:
    """Frozen settings snapshot."""

    environment: str
    db_path: Path
    db_timeout_s: float
    log_level: str
    log_dir: Path
    log_json: bool
    sentry_dsn: str | None

    @property
    def is_dev(self) -> bool:
        return self.environment in {"dev", "development"}


def _read_sentry_dsn() -> str | None:
    """Read the Sentry DSN from a secret file first, then the environment."""
    if dsn_file := _get_env("SENTRY_DSN_FILE"):
        with contextlib.suppress(OSError):
            dsn = Path(dsn_file).read_text(encoding="utf-8").strip()
            if dsn:
                return dsn
    return _get_env("SENTRY_DSN") or None


def get_settings() -> ProjectsSettings:
    """
    Build settings from the environment with safe defaults.

    Returns:
        ProjectsSettings: snapshot of database, logging and error tracking options.
    """
    user_data = default_user_data_directory()

    db_path_env = _get_env("PROJECTS_DB_PATH")
    db_path = Path(db_path_env).expanduser() if db_path_env else user_data / DB_FILE_NAME

    log_dir_env = _get_env("PROJECTS_LOG_DIR")
    log_dir = Path(log_dir_env).expanduser() if log_dir_env else user_data / "logs"

    return ProjectsSettings(
        environment=(_get_env("PROJECTS_ENV", "dev") or "dev").strip().lower(),
        db_path=db_path,
        db_timeout_s=_parse_float(_get_env("PROJECTS_DB_TIMEOUT_S"), 5.0),
        log_level=(_get_env("PROJECTS_LOG_LEVEL", "INFO") or "INFO").upper(),
        log_dir=log_dir,
        log_json=_parse_bool(_get_env("PROJECTS_LOG_JSON"), False),
        sentry_dsn=_read_sentry_dsn(),
    )
