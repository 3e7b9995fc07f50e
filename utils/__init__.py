"""
Utils Package - Core utilities for the projects tracker
Contains logging and error tracking helpers
"""

from .logger import Logger

__all__ = ["Logger"]
