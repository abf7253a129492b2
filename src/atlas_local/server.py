"""Atlas Local extension backend server."""

import os
import sys

import uvicorn

from atlas_local import __version__
from atlas_local.api import create_app
from atlas_local.config import get_settings
from atlas_local.utils import get_logger, setup_logging

logger = get_logger(__name__)


def remove_stale_socket(path: str) -> None:
    """
    Remove a socket file left behind by a previous run.

    Args:
        path: Socket path
    """
    try:
        os.remove(path)
        logger.debug("Removed stale socket", extra={"socket_path": path})
    except FileNotFoundError:
        pass


def main() -> None:
    """Main entry point for the Atlas Local extension backend."""
    settings = get_settings()

    setup_logging(log_level=settings.log_level, log_format=settings.log_format)

    logger.info(
        "Starting server",
        extra={
            "version": __version__,
            "socket_path": settings.socket_path,
            "strict_mode": settings.strict_mode,
        },
    )

    try:
        remove_stale_socket(settings.socket_path)
        uvicorn.run(
            create_app(),
            uds=settings.socket_path,
            log_config=None,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down")
        sys.exit(0)
    except Exception as e:
        logger.error("Server error", extra={"error": str(e)})
        sys.exit(1)


if __name__ == "__main__":
    main()
