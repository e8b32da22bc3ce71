"""
FastAPI routes for Repository CRUD and like operations.

Malformed ids under /repositories/{id} are rejected before routing by
RepositoryIdGuardMiddleware; every route here also validates the id through the
RepositoryId dependency before the store is consulted.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Response, status

from catalog.api.schemas.repository import (
    ErrorResponse,
    RepositoryCreate,
    RepositoryResponse,
    RepositoryUpdate,
)
from catalog.core.dependencies import RepositoryId, RepositoryStoreDep
from catalog.domain.models import Repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/repositories", tags=["Repositories"])

_INVALID_ID_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse,
        "description": "Malformed id, or no repository with this id",
    }
}


@router.get(
    "",
    response_model=list[RepositoryResponse],
    summary="List all repositories",
    description="Return every stored repository in creation order.",
)
async def list_repositories(store: RepositoryStoreDep) -> list[Repository]:
    """List all repositories."""
    return store.list_repositories()


@router.post(
    "",
    response_model=RepositoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a repository",
    description="""
    Store a new repository with a generated UUID and zero likes.

    **Request Body:**
    - `title`: Display title
    - `url`: Link to the repository
    - `techs`: List of technology tags

    Omitted fields are stored as null.
    """,
)
async def create_repository(
    store: RepositoryStoreDep,
    payload: Annotated[RepositoryCreate | None, Body()] = None,
) -> Repository:
    """Create a new repository."""
    payload = payload or RepositoryCreate()
    repository = store.create_repository(payload.title, payload.url, payload.techs)

    logger.info(
        f"Created repository: {repository.id}",
        extra={"repository_id": repository.id},
    )

    return repository


@router.put(
    "/{id}",
    response_model=RepositoryResponse,
    responses=_INVALID_ID_RESPONSES,
    summary="Update a repository",
    description="""
    Replace `title`, `url` and `techs` of an existing repository.

    The id and like count are preserved; likes in the body are ignored.
    """,
)
async def update_repository(
    repository_id: RepositoryId,
    store: RepositoryStoreDep,
    payload: Annotated[RepositoryUpdate | None, Body()] = None,
) -> Repository:
    """Update an existing repository."""
    payload = payload or RepositoryUpdate()
    repository = store.update_repository(repository_id, payload.title, payload.url, payload.techs)

    logger.info(
        f"Updated repository: {repository_id}",
        extra={"repository_id": repository_id},
    )

    return repository


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_INVALID_ID_RESPONSES,
    summary="Delete a repository",
)
async def delete_repository(repository_id: RepositoryId, store: RepositoryStoreDep) -> Response:
    """Delete a repository and answer with an empty body."""
    store.delete_repository(repository_id)

    logger.info(
        f"Deleted repository: {repository_id}",
        extra={"repository_id": repository_id},
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{id}/like",
    response_model=RepositoryResponse,
    responses=_INVALID_ID_RESPONSES,
    summary="Like a repository",
    description="Increment the repository's like count by one.",
)
async def like_repository(repository_id: RepositoryId, store: RepositoryStoreDep) -> Repository:
    """Add one like to a repository."""
    repository = store.like_repository(repository_id)

    logger.info(
        f"Liked repository: {repository_id}",
        extra={"repository_id": repository_id, "likes": repository.likes},
    )

    return repository
