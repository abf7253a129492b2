"""HTTP surface of the extension backend."""

import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from atlas_local import __version__
from atlas_local.managers.launch_manager import LaunchManager
from atlas_local.managers.listing_manager import ListingManager
from atlas_local.managers.runtime_client import DockerRuntimeClient, RuntimeClient
from atlas_local.schemas import DisplayRow, ErrorResponse, LaunchRequest, MessageResponse
from atlas_local.utils import get_logger
from atlas_local.utils.docker_client import close_docker_client, get_docker_client
from atlas_local.utils.exceptions import (
    RuntimeClientError,
    RuntimeUnavailableError,
    ValidationFailedError,
)

logger = get_logger(__name__)


class ContainerRoutes:
    """
    Atlas Local container router.

    Managers are bound once the runtime client is available, at application
    startup.

    Attributes:
        router: Instance of `APIRouter` with `/containers` endpoints.
    """

    def __init__(self) -> None:
        self.listing_manager: Optional[ListingManager] = None
        self.launch_manager: Optional[LaunchManager] = None
        self.router = self._build_router()

    def bind(self, runtime: RuntimeClient) -> None:
        """Create the managers on top of the given runtime client."""
        self.listing_manager = ListingManager(runtime)
        self.launch_manager = LaunchManager(runtime)

    def _build_router(self) -> APIRouter:
        router = APIRouter(prefix="/containers", tags=["Containers"])
        # GET /containers - list Atlas Local containers
        router.add_api_route(
            "",
            self.list_containers,
            methods=["GET"],
            response_model=List[DisplayRow],
            response_model_exclude_none=True,
            responses={500: {"model": ErrorResponse}},
        )
        # POST /containers - launch a new container
        router.add_api_route(
            "",
            self.create_container,
            methods=["POST"],
            response_model=MessageResponse,
            responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        )
        return router

    async def list_containers(
        self,
        criteria: str = Query(
            "", alias="filter", description="Filter by container name or version"
        ),
    ) -> List[DisplayRow]:
        """
        List Atlas Local containers with their connection strings.

        Raises:
            RuntimeUnavailableError: If the runtime cannot be listed
            InspectFailedError: If a container cannot be inspected in strict mode
        """
        return await self.listing_manager.list_rows(criteria)

    async def create_container(self, request: LaunchRequest) -> MessageResponse:
        """
        Create and start a new Atlas Local container.

        Raises:
            ValidationFailedError: If the launch options are invalid
            LaunchFailedError: If the runtime fails to create or start it
        """
        await self.launch_manager.launch(request)
        return MessageResponse(message="Container created")


async def validation_failed_handler(request: Request, exc: ValidationFailedError) -> JSONResponse:
    logger.warning("Rejected launch options", extra={"errors": exc.errors})
    body = ErrorResponse(message=str(exc), errors=exc.errors)
    return JSONResponse(status_code=400, content=body.model_dump())


async def runtime_error_handler(request: Request, exc: RuntimeClientError) -> JSONResponse:
    logger.error(
        "Runtime error while handling request",
        extra={"method": request.method, "uri": str(request.url.path), "error": str(exc)},
    )
    body = ErrorResponse(message=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


def create_app(
    runtime: RuntimeClient | None = None,
    title: str = "MongoDB Atlas Local",
    version: str = __version__,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        runtime: Runtime client to use; defaults to the Docker runtime
        title: FastAPI application title
        version: Application version string

    Returns:
        FastAPI app
    """
    container_routes = ContainerRoutes()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if runtime is not None:
            container_routes.bind(runtime)
            yield
            return

        # The daemon may be down at startup; DockerRuntimeClient connects on first use
        try:
            get_docker_client()
            logger.info("Docker client initialized successfully")
        except RuntimeUnavailableError as e:
            logger.warning(
                "Docker daemon unreachable at startup, will retry per request",
                extra={"error": str(e)},
            )

        container_routes.bind(DockerRuntimeClient())
        try:
            yield
        finally:
            logger.info("Shutting down Atlas Local backend")
            close_docker_client()

    app = FastAPI(title=title, version=version, lifespan=lifespan)
    app.include_router(container_routes.router)
    app.add_exception_handler(ValidationFailedError, validation_failed_handler)
    app.add_exception_handler(RuntimeClientError, runtime_error_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "Request handled",
            extra={
                "method": request.method,
                "uri": request.url.path,
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

    return app
