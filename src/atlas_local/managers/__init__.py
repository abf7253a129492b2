"""Manager modules for business logic."""

from .connection_resolver import connection_string, display_name, resolve
from .launch_manager import LaunchManager
from .listing_manager import ListingManager, filter_rows, status_color
from .runtime_client import ATLAS_LOCAL_LABEL, DockerRuntimeClient, RuntimeClient

__all__ = [
    "ATLAS_LOCAL_LABEL",
    "DockerRuntimeClient",
    "LaunchManager",
    "ListingManager",
    "RuntimeClient",
    "connection_string",
    "display_name",
    "filter_rows",
    "resolve",
    "status_color",
]
