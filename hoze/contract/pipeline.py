"""Operation invocation pipeline.

One invocation moves through a fixed sequence of states:

    START -> REQUEST_BOUND -> BEFORE_MIDDLEWARE_RUN -> HANDLED
          -> AFTER_MIDDLEWARE_RUN -> RESPONSE_BOUND

Each step may suspend while awaiting I/O. The first exception raised by any
step is wrapped in an InvocationError, every later step is skipped, the
failure is logged and a fallback problem response is written instead. There
is exactly one failure boundary; no step recovers on its own.

Invocations share nothing but their read-only Operation, so any number of
them may be interleaved by the event loop.
"""

import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger

from hoze.contract.binding import bind_problem, bind_request, bind_response
from hoze.contract.operation import Operation
from hoze.contract.problems import build_problem
from hoze.contract.transport import TransportRequest, TransportResponse
from hoze.core.config import get_settings
from hoze.core.constants import MILLISECONDS_PER_SECOND
from hoze.core.context import RequestContext, generate_invocation_id
from hoze.core.error_context import (
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
)
from hoze.core.exceptions import InvocationError, RequestBindingError


class InvocationState(StrEnum):
    """States of one invocation; FAILED is reachable from every other state."""

    START = "START"
    REQUEST_BOUND = "REQUEST_BOUND"
    BEFORE_MIDDLEWARE_RUN = "BEFORE_MIDDLEWARE_RUN"
    HANDLED = "HANDLED"
    AFTER_MIDDLEWARE_RUN = "AFTER_MIDDLEWARE_RUN"
    RESPONSE_BOUND = "RESPONSE_BOUND"
    FAILED = "FAILED"


class InvocationStep(StrEnum):
    """The step being attempted when an invocation fails."""

    BIND_REQUEST = "request binding"
    BEFORE_MIDDLEWARE = "before-middleware"
    HANDLER = "handler"
    AFTER_MIDDLEWARE = "after-middleware"
    BIND_RESPONSE = "response binding"


@dataclass(frozen=True)
class InvocationOutcome:
    """What happened during one invocation.

    Attributes:
        invocation_id: Unique ID of the invocation, also the problem ``instance``.
        operation_id: The invoked operation.
        state: Terminal state, RESPONSE_BOUND or FAILED.
        failed_from: Last state reached before failing, if it failed.
        error: The wrapped failure, if any.
        fallback_written: Whether the fallback problem response was written.
        duration_ms: Wall-clock duration of the invocation.
    """

    invocation_id: str
    operation_id: str
    state: InvocationState
    duration_ms: float
    failed_from: InvocationState | None = None
    error: InvocationError | None = None
    fallback_written: bool = False

    @property
    def succeeded(self) -> bool:
        """Whether the response value was bound and written."""
        return self.state is InvocationState.RESPONSE_BOUND


def _log_failure(
    error: InvocationError,
    raw_request: TransportRequest,
    failed_from: InvocationState,
) -> None:
    """Record a failed invocation for operator diagnosis."""
    cause = error.cause or error
    error_context = sanitize_error_context(
        cause,
        {
            "step": error.step,
            "failed_from": failed_from.value,
            "middleware_index": error.middleware_index,
            "path_parameters": sanitize_dict(raw_request.path_parameters),
            "query_parameters": sanitize_dict(raw_request.query_parameters),
            "headers": sanitize_headers(raw_request.headers),
            "fingerprint": error.fingerprint,
        },
    )

    if isinstance(cause, RequestBindingError):
        logger.warning(
            "Request binding failed: {message}",
            message=cause.message,
            validation_errors=cause.errors,
            **error_context,
        )
        return

    if error.should_alert:
        logger.opt(exception=cause).error(
            "Invocation failed during {step}: {exception_type}",
            exception_type=type(cause).__name__,
            **error_context,
        )
        return

    logger.warning(
        "Invocation failed during {step}: {error_type}: {error_message}",
        **error_context,
    )


def _write_fallback(
    raw_response: TransportResponse,
    invocation_id: str,
    error: InvocationError,
) -> bool:
    """Write the fallback problem response. Never raises.

    Returns:
        bool: Whether the problem response was written.
    """
    try:
        pipeline_config = get_settings().pipeline_config

        exposed_errors = None
        if pipeline_config.expose_validation_errors and isinstance(
            error.cause, RequestBindingError
        ):
            exposed_errors = error.cause.errors

        problem = build_problem(
            pipeline_config.fallback_status_code,
            instance=invocation_id,
            correlation_id=RequestContext.get_correlation_id(),
            errors=exposed_errors,
        )
        written = bind_problem(
            raw_response, problem, pipeline_config.problem_content_type
        )
    except Exception:  # noqa: BLE001 - the fallback is the last line of defense
        logger.opt(exception=True).critical(
            "Fallback problem response could not be written"
        )
        return False

    if not written:
        logger.warning("Response already sent; fallback problem response skipped")
    return written


async def invoke(
    raw_request: TransportRequest,
    raw_response: TransportResponse,
    operation: Operation[Any, Any],
) -> InvocationOutcome:
    """Invoke an operation for one raw request/response pair.

    Args:
        raw_request: The raw transport request.
        raw_response: The raw transport response. Written exactly once, either
            by the response binder or by the fallback.
        operation: The descriptor registered for the matched route.

    Returns:
        InvocationOutcome: The terminal state and, on failure, the error.
    """
    invocation_id = generate_invocation_id()
    start_time = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - start_time) * MILLISECONDS_PER_SECOND, 2)

    with logger.contextualize(
        operation_id=operation.operation_id, invocation_id=invocation_id
    ):
        state = InvocationState.START
        step = InvocationStep.BIND_REQUEST
        middleware_index: int | None = None

        try:
            request_value = bind_request(raw_request, operation)
            state = InvocationState.REQUEST_BOUND
            logger.debug("Request bound")

            step = InvocationStep.BEFORE_MIDDLEWARE
            for middleware_index, before in enumerate(operation.before_middleware):
                await before(raw_request, raw_response, request_value)
            middleware_index = None
            state = InvocationState.BEFORE_MIDDLEWARE_RUN

            step = InvocationStep.HANDLER
            response_value = await operation.handler(request_value)
            state = InvocationState.HANDLED
            logger.debug("Handler returned")

            step = InvocationStep.AFTER_MIDDLEWARE
            for middleware_index, after in enumerate(operation.after_middleware):
                await after(raw_request, raw_response, request_value, response_value)
            middleware_index = None
            state = InvocationState.AFTER_MIDDLEWARE_RUN

            step = InvocationStep.BIND_RESPONSE
            bind_response(raw_response, operation, response_value)
        except Exception as exc:  # noqa: BLE001 - single failure boundary
            error = InvocationError(
                operation.operation_id, step.value, exc, middleware_index
            )
            _log_failure(error, raw_request, state)
            written = _write_fallback(raw_response, invocation_id, error)
            return InvocationOutcome(
                invocation_id=invocation_id,
                operation_id=operation.operation_id,
                state=InvocationState.FAILED,
                duration_ms=elapsed_ms(),
                failed_from=state,
                error=error,
                fallback_written=written,
            )

        logger.debug("Response bound")
        return InvocationOutcome(
            invocation_id=invocation_id,
            operation_id=operation.operation_id,
            state=InvocationState.RESPONSE_BOUND,
            duration_ms=elapsed_ms(),
        )
