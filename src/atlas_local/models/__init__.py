"""Domain models for the Atlas Local extension backend."""

from .containers import ConnectionEndpoint, ContainerRecord, PortMapping, RuntimeCreateParams

__all__ = ["ConnectionEndpoint", "ContainerRecord", "PortMapping", "RuntimeCreateParams"]
