"""FastAPI application initialization and configuration module.

This module serves as the main entry point for the Hoze API application.
It handles:
- Application lifecycle management (startup/shutdown)
- Middleware registration in the correct order
- Exception handler registration
- Health check and info endpoints
- Registration of the operation routers

Middleware are executed in reverse order of registration, so the last
middleware added is the first to see a request.
"""

from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from loguru import logger

from hoze.api.middleware.error_handler import register_exception_handlers
from hoze.api.middleware.request_context import RequestContextMiddleware
from hoze.api.middleware.request_logging import RequestLoggingMiddleware
from hoze.api.routing import OperationRouter, collect_operations
from hoze.api.utils.responses import ORJSONResponse
from hoze.core.config import Settings, get_settings
from hoze.core.logging import setup_logging
from hoze.petstore import petstore_router


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.
    """
    for (method, path), operation in app_instance.state.operations.items():
        logger.info("Serving {} {} -> {}", method, path, operation.operation_id)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    # Uvicorn has stopped accepting connections and drained in-flight requests
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    routers: Sequence[OperationRouter] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().
        routers: Operation routers to serve. Defaults to the petstore router.

    Returns:
        FastAPI: Configured FastAPI application instance.

    Raises:
        DuplicateOperationError: If two routers register the same method and path.
    """
    if settings is None:
        settings = get_settings()
    if routers is None:
        routers = [petstore_router()]

    # Setup logging first
    setup_logging(settings)

    operations = collect_operations(routers)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.operations = operations

    # Register exception handlers BEFORE middleware
    register_exception_handlers(application)

    # 2. Request logging middleware (logs requests/responses)
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)

    # 1. Request context middleware (creates correlation ID)
    application.add_middleware(RequestContextMiddleware)

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            dict[str, object]: Status and the number of operations served.
        """
        return {"status": "healthy", "operations": len(operations)}

    @application.get("/info")
    async def info(
        app_settings: Annotated[Settings, Depends(get_settings)],
    ) -> dict[str, Any]:
        """Get application information.

        Args:
            app_settings: Application settings injected via dependency.

        Returns:
            dict[str, Any]: Application information including name, version,
                and environment.
        """
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
        }

    for router in routers:
        application.include_router(router)

    return application


app = create_app()
