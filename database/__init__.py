"""
Database Package - Database management and operations
Contains connection setup, the projects data access layer and its service
"""

# Keep initializer lightweight; import concrete modules directly at call sites.
__all__: list[str] = []
