"""Derivation of MongoDB connection strings from inspected containers.

Only the port published for the container's 27017/tcp is considered. Root
credentials and the initial database are read from the environment the
container was created with. Values are taken verbatim: a password with
reserved URI characters is not percent-encoded, matching what users see in
``docker inspect``.
"""

from typing import Optional

from atlas_local.models.containers import (
    DEFAULT_DATABASE,
    MONGODB_PORT,
    ConnectionEndpoint,
    ContainerRecord,
    PortMapping,
)

USERNAME_PREFIX = "MONGODB_INITDB_ROOT_USERNAME="
PASSWORD_PREFIX = "MONGODB_INITDB_ROOT_PASSWORD="
DATABASE_PREFIX = "MONGODB_INITDB_DATABASE="

NAME_FALLBACK_LENGTH = 12


def find_mongodb_port(record: ContainerRecord) -> Optional[PortMapping]:
    """
    Find the published MongoDB port of a container.

    Args:
        record: Container record

    Returns:
        First 27017/tcp mapping bound to a non-zero host port, or None
    """
    for port in record.ports:
        if port.private_port != MONGODB_PORT or port.protocol != "tcp":
            continue
        if port.public_port and 0 < port.public_port <= 65535:
            return port
    return None


def resolve(record: ContainerRecord) -> Optional[ConnectionEndpoint]:
    """
    Derive the connection endpoint of a container.

    Args:
        record: Inspected container record

    Returns:
        ConnectionEndpoint, or None when MongoDB is not published on the host
    """
    port = find_mongodb_port(record)
    if port is None:
        return None

    username = ""
    password = ""
    database = DEFAULT_DATABASE
    # Later entries override earlier ones
    for entry in record.env or []:
        if entry.startswith(USERNAME_PREFIX):
            username = entry[len(USERNAME_PREFIX):]
        elif entry.startswith(PASSWORD_PREFIX):
            password = entry[len(PASSWORD_PREFIX):]
        elif entry.startswith(DATABASE_PREFIX):
            database = entry[len(DATABASE_PREFIX):]

    return ConnectionEndpoint(
        host_port=port.public_port,
        username=username or None,
        password=password or None,
        database=database,
    )


def connection_string(record: ContainerRecord) -> Optional[str]:
    """Return the connection string of a container, or None without a published port."""
    endpoint = resolve(record)
    return endpoint.to_connection_string() if endpoint else None


def display_name(record: ContainerRecord) -> str:
    """
    Get the name shown for a container.

    The runtime reports names with a leading slash; exactly one is removed.
    Containers without a usable name are shown by their short ID.
    """
    if record.names and record.names[0]:
        name = record.names[0]
        name = name[1:] if name.startswith("/") else name
        if name:
            return name
    return record.id[:NAME_FALLBACK_LENGTH]
