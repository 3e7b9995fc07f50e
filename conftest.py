# Root-level pytest configuration applied to all tests
# - Keep the repo root importable so tests can `from models...` and `from database...`
# - Send log files to a throwaway directory instead of the user data dir

from pathlib import Path
import os
import sys
import tempfile


def _add_repo_root_to_sys_path() -> None:
    repo_root = Path(__file__).resolve().parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


def _redirect_user_data() -> None:
    base = Path(tempfile.gettempdir()) / "ProjectsTrackerTests" / f"run_{os.getpid()}"
    os.environ.setdefault("PROJECTS_USER_DATA", str(base))
    os.environ.setdefault("PROJECTS_LOG_DIR", str(base / "logs"))


_add_repo_root_to_sys_path()
_redirect_user_data()
