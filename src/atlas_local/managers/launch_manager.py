"""Validation and launching of new Atlas Local containers."""

import asyncio
from typing import Dict, Optional

from atlas_local.config import get_settings
from atlas_local.managers.connection_resolver import PASSWORD_PREFIX, USERNAME_PREFIX
from atlas_local.managers.runtime_client import (
    ATLAS_LOCAL_LABEL,
    DockerRuntimeClient,
    RuntimeClient,
)
from atlas_local.models.containers import MONGODB_PORT, RuntimeCreateParams
from atlas_local.schemas import LaunchRequest
from atlas_local.utils import get_logger
from atlas_local.utils.exceptions import ValidationFailedError

logger = get_logger(__name__)

LABEL_KEY, _, LABEL_VALUE = ATLAS_LOCAL_LABEL.partition("=")

USERNAME_REQUIRED = "Username is required when authentication is enabled"
PASSWORD_REQUIRED = "Password is required when authentication is enabled"
PORT_OUT_OF_RANGE = "Port must be a number between 1 and 65535"


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def parse_port(value: Optional[str]) -> Optional[int]:
    """
    Parse a requested host port.

    Args:
        value: Port text, blank means auto-assign

    Returns:
        Port number, or None for auto-assign

    Raises:
        ValueError: If the text is not an integer in 1-65535
    """
    if _blank(value):
        return None
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"Invalid port: {value}")
    port = int(text)
    if not 1 <= port <= 65535:
        raise ValueError(f"Port out of range: {port}")
    return port


class LaunchManager:
    """Manager for launching Atlas Local containers."""

    def __init__(self, runtime: RuntimeClient | None = None) -> None:
        """
        Initialize launch manager.

        Args:
            runtime: Runtime client, defaults to the Docker runtime
        """
        self.settings = get_settings()
        self.runtime: RuntimeClient = runtime or DockerRuntimeClient()

    def validate(self, request: LaunchRequest) -> Dict[str, str]:
        """
        Validate launch options.

        Every rule is checked so all problems are reported at once.

        Args:
            request: Launch options

        Returns:
            Validation messages keyed by field name, empty when valid
        """
        errors: Dict[str, str] = {}

        if request.use_authentication:
            if _blank(request.username):
                errors["username"] = USERNAME_REQUIRED
            if _blank(request.password):
                errors["password"] = PASSWORD_REQUIRED

        try:
            parse_port(request.port)
        except ValueError:
            errors["port"] = PORT_OUT_OF_RANGE

        return errors

    def build(self, request: LaunchRequest) -> RuntimeCreateParams:
        """
        Turn launch options into runtime creation parameters.

        Args:
            request: Launch options

        Returns:
            RuntimeCreateParams

        Raises:
            ValidationFailedError: If the options are invalid
        """
        errors = self.validate(request)
        if errors:
            raise ValidationFailedError(errors)

        environment = []
        if request.use_authentication:
            environment.append(f"{USERNAME_PREFIX}{request.username.strip()}")
            environment.append(f"{PASSWORD_PREFIX}{request.password.strip()}")

        name = None if _blank(request.name) else request.name.strip()

        return RuntimeCreateParams(
            image=self.settings.image,
            name=name,
            hostname=name,
            environment=environment,
            ports={f"{MONGODB_PORT}/tcp": parse_port(request.port)},
            labels={LABEL_KEY: LABEL_VALUE},
        )

    async def launch(self, request: LaunchRequest) -> str:
        """
        Create and start a new container.

        The container is not waited on; it shows up in the next listing.

        Args:
            request: Launch options

        Returns:
            ID of the started container

        Raises:
            ValidationFailedError: If the options are invalid
            LaunchFailedError: If the runtime fails to create or start it
        """
        params = self.build(request)

        container_id = await asyncio.to_thread(self.runtime.create_container, params)
        await asyncio.to_thread(self.runtime.start_container, container_id)

        logger.info(
            "Atlas Local container launched",
            extra={
                "docker_id": container_id,
                "name": params.name,
                "host_port": params.ports[f"{MONGODB_PORT}/tcp"],
                "authenticated": bool(params.environment),
            },
        )
        return container_id

