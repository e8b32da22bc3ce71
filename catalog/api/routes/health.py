from fastapi import APIRouter

from catalog.core.dependencies import RepositoryStoreDep

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    """Basic health check endpoint."""
    return {"ok": True}


@router.get("/readyz")
def readyz(store: RepositoryStoreDep) -> dict:
    """Readiness probe: reports that the in-memory store is reachable and its size."""
    return {"ok": True, "store": "ok", "repositories": store.count()}
