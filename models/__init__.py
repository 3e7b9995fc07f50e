"""
Lightweight repo-local models for the projects tracker.
Plain dataclasses shared by the database and CLI layers.
"""

from .project import Category, Material, Project, Step

__all__ = [
    "Category",
    "Material",
    "Project",
    "Step",
]
