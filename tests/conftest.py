"""
Pytest configuration and shared fixtures for the Repository Catalog API tests.

Provides:
- A fresh application (and therefore an empty store) per test
- FastAPI TestClient bound to that application
- A factory creating repositories through the HTTP API
- A real uvicorn server for tests marked e2e_integration
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

# Add the project root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Set test environment variables before importing the app
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("OTEL_ENABLED", "false")

import httpx  # noqa: E402 (import after env setup)
import pytest  # noqa: E402 (import after env setup)
from fastapi import FastAPI  # noqa: E402 (import after env setup)
from fastapi.testclient import TestClient  # noqa: E402 (import after env setup)

from catalog.main import create_app  # noqa: E402 (import after env setup)
from catalog.repos.repository_repo import RepositoryStore  # noqa: E402 (import after env setup)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def app() -> FastAPI:
    """Application with its own empty repository store."""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store(app: FastAPI) -> RepositoryStore:
    return app.state.repository_store


@pytest.fixture
def repository_payload() -> dict[str, Any]:
    return {
        "title": "Desafio Node.js",
        "url": "https://github.com/example/desafio-node",
        "techs": ["Node.js", "Express"],
    }


@pytest.fixture
def create_repository(client: TestClient) -> Callable[..., dict[str, Any]]:
    """
    Factory creating a repository through POST /repositories.

    Usage:
        repo = create_repository(title="X")
    """

    def _create(**overrides: Any) -> dict[str, Any]:
        payload = {
            "title": "Repository",
            "url": "https://github.com/example/repository",
            "techs": ["Python"],
        }
        payload.update(overrides)
        response = client.post("/repositories", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


# ============================================================================
# E2E server
# ============================================================================


def _wait_for_e2e_server(base_url: str, timeout_s: float) -> None:
    start_time = time.time()
    while time.time() - start_time < timeout_s:
        try:
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                return
        except httpx.HTTPError:
            pass
        time.sleep(0.5)
    raise RuntimeError(f"E2E server failed to become healthy within {timeout_s}s: {base_url}")


@pytest.fixture(scope="session")
def e2e_server_port() -> int:
    """Port for E2E test server. Override with E2E_PORT env var."""
    return int(os.environ.get("E2E_PORT", "8001"))


@pytest.fixture(scope="session")
def e2e_server_base_url(e2e_server_port: int) -> Generator[str]:
    """
    Start a real uvicorn server for E2E tests.

    Set E2E_USE_EXISTING_SERVER=true to test a server that is already running.
    """
    import subprocess

    base_url = f"http://127.0.0.1:{e2e_server_port}"

    if os.environ.get("E2E_USE_EXISTING_SERVER", "").strip().lower() in {"1", "true", "yes"}:
        _wait_for_e2e_server(base_url, timeout_s=30)
        yield base_url
        return

    server_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "catalog.main:app",
            "--host",
            "127.0.0.1",
            "--port",
            str(e2e_server_port),
        ],
        cwd=ROOT,
    )

    try:
        _wait_for_e2e_server(base_url, timeout_s=30)
    except RuntimeError:
        server_proc.kill()
        server_proc.wait(timeout=5)
        raise

    try:
        yield base_url
    finally:
        server_proc.terminate()
        try:
            server_proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            server_proc.kill()
            server_proc.wait(timeout=5)
