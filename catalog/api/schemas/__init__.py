"""
Pydantic schemas for API request/response validation.
"""

# Re-export schemas for convenient imports.
from .repository import ErrorResponse as ErrorResponse
from .repository import RepositoryCreate as RepositoryCreate
from .repository import RepositoryResponse as RepositoryResponse
from .repository import RepositoryUpdate as RepositoryUpdate
