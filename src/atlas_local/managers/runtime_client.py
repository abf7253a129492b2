"""Container runtime capability and its Docker implementation."""

from typing import Any, Dict, List, Optional, Protocol

from docker import DockerClient
from docker.errors import DockerException, ImageNotFound
from requests.exceptions import RequestException

from atlas_local.models.containers import ContainerRecord, PortMapping, RuntimeCreateParams
from atlas_local.utils import get_logger
from atlas_local.utils.docker_client import get_docker_client
from atlas_local.utils.exceptions import (
    InspectFailedError,
    LaunchFailedError,
    RuntimeUnavailableError,
)

logger = get_logger(__name__)

# Label carried by every Atlas Local container
ATLAS_LOCAL_LABEL = "mongodb-atlas-local=container"

# docker-py leaves transport failures (daemon down or restarting) as requests errors
DOCKER_ERRORS = (DockerException, RequestException)


class RuntimeClient(Protocol):
    """Operations the backend needs from a container runtime."""

    def list_containers(self, label_filter: str) -> List[ContainerRecord]:
        """List containers carrying the given ``key=value`` label."""
        ...

    def inspect_container(self, container_id: str) -> ContainerRecord:
        """Return the container with env, ports and names populated."""
        ...

    def create_container(self, params: RuntimeCreateParams) -> str:
        """Create a container and return its ID."""
        ...

    def start_container(self, container_id: str) -> None:
        """Start a created container."""
        ...


def _parse_host_port(value: Any) -> Optional[int]:
    """Parse a published host port, treating blank and unparsable values as unbound."""
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def record_from_list_attrs(attrs: Dict[str, Any]) -> ContainerRecord:
    """
    Build a record from a container list entry.

    Args:
        attrs: One entry of the runtime's container list response

    Returns:
        ContainerRecord without env
    """
    ports = [
        PortMapping(
            private_port=int(port["PrivatePort"]),
            public_port=_parse_host_port(port.get("PublicPort")),
            protocol=port.get("Type") or "tcp",
        )
        for port in attrs.get("Ports") or []
    ]
    return ContainerRecord(
        id=attrs["Id"],
        names=list(attrs.get("Names") or []),
        status=attrs.get("Status") or "",
        labels=dict(attrs.get("Labels") or {}),
        ports=ports,
    )


def record_from_inspect_attrs(attrs: Dict[str, Any]) -> ContainerRecord:
    """
    Build a record from a container inspect response.

    Args:
        attrs: The runtime's inspect response

    Returns:
        ContainerRecord with env, ports and names populated
    """
    config = attrs.get("Config") or {}
    network_settings = attrs.get("NetworkSettings") or {}

    ports: List[PortMapping] = []
    for key, bindings in (network_settings.get("Ports") or {}).items():
        container_port, _, protocol = key.partition("/")
        if not bindings:
            ports.append(PortMapping(int(container_port), None, protocol or "tcp"))
            continue
        for binding in bindings:
            ports.append(
                PortMapping(
                    int(container_port),
                    _parse_host_port(binding.get("HostPort")),
                    protocol or "tcp",
                )
            )

    name = attrs.get("Name") or ""
    state = attrs.get("State") or {}
    return ContainerRecord(
        id=attrs["Id"],
        names=[name] if name else [],
        status=state.get("Status") or "",
        labels=dict(config.get("Labels") or {}),
        ports=ports,
        env=list(config.get("Env") or []),
    )


class DockerRuntimeClient:
    """RuntimeClient backed by the Docker SDK."""

    def __init__(self, docker_client: DockerClient | None = None) -> None:
        """
        Initialize the runtime client.

        Args:
            docker_client: Docker client to use, defaults to the process-wide client
        """
        self._docker_client: DockerClient | None = docker_client

    @property
    def docker_client(self) -> DockerClient:
        """
        Docker client, connected on first use.

        Raises:
            RuntimeUnavailableError: If the Docker daemon cannot be reached
        """
        if self._docker_client is None:
            self._docker_client = get_docker_client()
        return self._docker_client

    def list_containers(self, label_filter: str) -> List[ContainerRecord]:
        """
        List containers matching a label filter, including stopped ones.

        Raises:
            RuntimeUnavailableError: If the runtime cannot be queried
        """
        try:
            containers = self.docker_client.containers.list(
                all=True, sparse=True, filters={"label": label_filter}
            )
        except DOCKER_ERRORS as e:
            logger.error("Docker error listing containers", extra={"error": str(e)})
            raise RuntimeUnavailableError(f"Failed to list containers: {e}", e)

        return [record_from_list_attrs(container.attrs) for container in containers]

    def inspect_container(self, container_id: str) -> ContainerRecord:
        """
        Inspect one container.

        Raises:
            InspectFailedError: If the container cannot be inspected
        """
        try:
            container = self.docker_client.containers.get(container_id)
        except DOCKER_ERRORS as e:
            logger.error(
                "Docker error inspecting container",
                extra={"container_id": container_id, "error": str(e)},
            )
            raise InspectFailedError(container_id, e)

        return record_from_inspect_attrs(container.attrs)

    def create_container(self, params: RuntimeCreateParams) -> str:
        """
        Create a container, pulling the image first when it is missing locally.

        Raises:
            LaunchFailedError: If the container cannot be created
        """
        ports = {
            container_port: ("0.0.0.0", host_port) if host_port else None
            for container_port, host_port in params.ports.items()
        }
        kwargs = {
            "image": params.image,
            "name": params.name,
            "hostname": params.hostname,
            "environment": params.environment,
            "ports": ports,
            "labels": params.labels,
            "detach": True,
        }

        try:
            try:
                container = self.docker_client.containers.create(**kwargs)
            except ImageNotFound:
                logger.info("Pulling image", extra={"image": params.image})
                self.docker_client.images.pull(params.image)
                logger.info("Image pulled successfully", extra={"image": params.image})
                container = self.docker_client.containers.create(**kwargs)
        except (DockerException, RequestException, RuntimeUnavailableError) as e:
            logger.error(
                "Docker error creating container",
                extra={"image": params.image, "name": params.name, "error": str(e)},
            )
            raise LaunchFailedError(f"Failed to create container: {e}", e)

        logger.info(
            "Docker container created",
            extra={"docker_id": container.id, "image": params.image, "name": params.name},
        )
        return container.id

    def start_container(self, container_id: str) -> None:
        """
        Start a container.

        Raises:
            LaunchFailedError: If the container cannot be started
        """
        try:
            self.docker_client.containers.get(container_id).start()
        except (DockerException, RequestException, RuntimeUnavailableError) as e:
            logger.error(
                "Docker error starting container",
                extra={"docker_id": container_id, "error": str(e)},
            )
            raise LaunchFailedError(f"Failed to start container: {e}", e)

        logger.info("Docker container started", extra={"docker_id": container_id})
