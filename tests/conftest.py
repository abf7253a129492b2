"""Test configuration and fixtures."""

from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from atlas_local.config import get_settings
from atlas_local.models.containers import ContainerRecord, PortMapping
from atlas_local.utils.docker_client import get_docker_client

CONTAINER_ID = "3f4e5d6c7b8a9f0e1d2c3b4a5f6e7d8c9b0a1f2e3d4c5b6a7f8e9d0c1b2a3f4e"


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Give every test default settings, unaffected by the host environment."""
    for name in (
        "ATLAS_LOCAL_SOCKET_PATH",
        "ATLAS_LOCAL_DOCKER_HOST",
        "ATLAS_LOCAL_IMAGE",
        "ATLAS_LOCAL_INCLUDE_STOPPED",
        "ATLAS_LOCAL_STRICT_MODE",
        "ATLAS_LOCAL_LOG_LEVEL",
        "ATLAS_LOCAL_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def build_record(
    container_id: str = CONTAINER_ID,
    names: Optional[List[str]] = None,
    status: str = "Up 2 minutes",
    version: Optional[str] = "8.0.4",
    host_port: Optional[int] = 27017,
    env: Optional[List[str]] = None,
) -> ContainerRecord:
    """Build a container record with a single 27017/tcp mapping."""
    labels = {"mongodb-atlas-local": "container"}
    if version is not None:
        labels["version"] = version
    return ContainerRecord(
        id=container_id,
        names=["/my-mongo"] if names is None else names,
        status=status,
        labels=labels,
        ports=[PortMapping(27017, host_port, "tcp")],
        env=env,
    )


@pytest.fixture
def make_record():
    """Factory for container records."""
    return build_record


@pytest.fixture
def mock_runtime():
    """Create a mock runtime client."""
    return MagicMock()


@pytest.fixture(scope="session")
def docker_available():
    """Check if Docker daemon is available."""
    try:
        client = get_docker_client()
        client.ping()
        return True
    except Exception:
        return False


@pytest.fixture
def require_docker(docker_available):
    """Skip test if Docker is not available."""
    if not docker_available:
        pytest.skip("Docker daemon not available - skipping integration test")
