"""Global exception handlers for failures outside the invocation pipeline.

Operations translate their own failures into problem responses. These
handlers give everything else the same shape: requests for unknown routes,
methods a route does not serve, and errors raised by the transport adapter
before an invocation starts.
"""

from fastapi import FastAPI, Request
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from hoze.api.utils.responses import ProblemJSONResponse
from hoze.contract.problems import build_problem
from hoze.core.config import get_settings
from hoze.core.context import RequestContext, generate_request_id
from hoze.core.error_context import sanitize_error_context


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException (404 for unknown routes, 405, ...).

    Args:
        request: The request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: Problem response with the exception's status code

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        method=request.method,
        path=str(request.url.path),
        detail=exc.detail,
    )

    problem = build_problem(
        exc.status_code,
        instance=generate_request_id(),
        correlation_id=RequestContext.get_correlation_id(),
    )
    return ProblemJSONResponse(
        status_code=exc.status_code,
        content=problem.to_content(),
        headers=exc.headers,
        media_type=get_settings().pipeline_config.problem_content_type,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle exceptions raised outside any operation invocation.

    The exception detail is logged, never returned.

    Args:
        request: The request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: Problem response with the configured fallback status
    """
    pipeline_config = get_settings().pipeline_config

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )
    logger.opt(exception=exc).error(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        **error_context,
    )

    problem = build_problem(
        pipeline_config.fallback_status_code,
        instance=generate_request_id(),
        correlation_id=RequestContext.get_correlation_id(),
    )
    return ProblemJSONResponse(
        status_code=pipeline_config.fallback_status_code,
        content=problem.to_content(),
        media_type=pipeline_config.problem_content_type,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")

