"""
Config Package - runtime settings for the projects tracker
"""

from .settings import ProjectsSettings, get_settings, load_env_files

__all__ = ["ProjectsSettings", "get_settings", "load_env_files"]
