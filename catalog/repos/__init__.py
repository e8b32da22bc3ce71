"""
Repository layer for data access operations.

This package contains the in-memory store that owns all Repository records.
"""

from catalog.repos.repository_repo import RepositoryStore

__all__ = ["RepositoryStore"]
