"""
FastAPI dependency injection utilities.

Provides the repository store accessor and the path id check shared by every
route under /repositories/{id}.
"""

from typing import Annotated

from fastapi import Depends, Path, Request

from catalog.core.validators import validate_repository_id
from catalog.repos.repository_repo import RepositoryStore


def get_repository_store(request: Request) -> RepositoryStore:
    """
    Return the store owned by the running application.

    The store is created empty by create_app() and kept on app.state.
    """
    return request.app.state.repository_store


RepositoryStoreDep = Annotated[RepositoryStore, Depends(get_repository_store)]


def valid_repository_id(
    id: Annotated[str, Path(description="Repository UUID")],
) -> str:
    """
    Reject malformed path ids before any handler runs.

    Raises:
        MalformedIdError: If the id is not in UUID format
    """
    return validate_repository_id(id)


RepositoryId = Annotated[str, Depends(valid_repository_id)]
