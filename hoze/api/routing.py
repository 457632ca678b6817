"""Route registration for operations.

OperationRouter is a FastAPI router whose routes each serve exactly one
Operation. The route endpoint adapts the Starlette request, runs the
invocation pipeline and returns whatever the pipeline wrote; it does not
touch the response itself.
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from http import HTTPStatus
from types import MappingProxyType
from typing import Any

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import Response

from hoze.api.transport import BufferedTransportResponse, StarletteTransportRequest
from hoze.contract.operation import Operation, variant_status_codes
from hoze.contract.pipeline import invoke
from hoze.contract.problems import ProblemDetails
from hoze.core.exceptions import DuplicateOperationError

type OperationKey = tuple[str, str]
type Endpoint = Callable[[Request], Awaitable[Response]]

_KNOWN_STATUS_CODES = frozenset(status.value for status in HTTPStatus)


def build_endpoint(operation: Operation[Any, Any]) -> Endpoint:
    """Create the route endpoint serving one operation.

    Args:
        operation: The operation to serve.

    Returns:
        Endpoint: A FastAPI endpoint taking the raw Starlette request.
    """

    async def endpoint(request: Request) -> Response:
        raw_request = await StarletteTransportRequest.from_request(request)
        raw_response = BufferedTransportResponse()
        await invoke(raw_request, raw_response, operation)
        return raw_response.to_starlette()

    endpoint.__name__ = operation.operation_id
    return endpoint


def openapi_responses(operation: Operation[Any, Any]) -> dict[int | str, dict[str, Any]]:
    """Describe an operation's declared response variants for OpenAPI.

    Args:
        operation: The operation to describe.

    Returns:
        dict[int | str, dict[str, Any]]: FastAPI ``responses`` mapping.
    """
    responses: dict[int | str, dict[str, Any]] = {}
    for variant in operation.response_variants:
        body = variant.model_fields["body"].annotation
        for code in variant_status_codes(variant):
            phrase = HTTPStatus(code).phrase if code in _KNOWN_STATUS_CODES else ""
            entry: dict[str, Any] = {"description": phrase or f"Status {code}"}
            if isinstance(body, type) and issubclass(body, BaseModel):
                entry["model"] = body
            responses[code] = entry

    responses["5XX"] = {
        "description": "The invocation failed",
        "model": ProblemDetails,
    }
    return responses


class OperationRouter(APIRouter):
    """APIRouter that registers Operations on method + path pairs.

    At most one operation may be registered per method and path.
    """

    def __init__(self, **kwargs: Any) -> None:  # noqa: ANN401 - forwarded to APIRouter
        super().__init__(**kwargs)
        self._operations: dict[OperationKey, Operation[Any, Any]] = {}

    @property
    def operations(self) -> Mapping[OperationKey, Operation[Any, Any]]:
        """Registered operations keyed by (method, full path)."""
        return MappingProxyType(self._operations)

    def add_operation(
        self, method: str, path: str, operation: Operation[Any, Any]
    ) -> None:
        """Register an operation for a method and path.

        Args:
            method: HTTP method, case-insensitive.
            path: Route path relative to the router prefix, e.g. ``/pets/{petId}``.
            operation: The operation to serve.

        Raises:
            DuplicateOperationError: If an operation is already registered for
                the same method and path.
        """
        method = method.upper()
        key = (method, self.prefix + path)
        if key in self._operations:
            raise DuplicateOperationError(*key)

        self._operations[key] = operation
        self.add_api_route(
            path,
            build_endpoint(operation),
            methods=[method],
            name=operation.operation_id,
            summary=operation.summary,
            operation_id=operation.operation_id,
            responses=openapi_responses(operation),
            response_class=Response,
        )
        logger.debug(
            "Registered operation {} for {} {}",
            operation.operation_id,
            *key,
        )


def collect_operations(
    routers: Iterable[OperationRouter],
) -> dict[OperationKey, Operation[Any, Any]]:
    """Merge the operations of several routers.

    Raises:
        DuplicateOperationError: If two routers register the same method and path.
    """
    operations: dict[OperationKey, Operation[Any, Any]] = {}
    for router in routers:
        for key, operation in router.operations.items():
            if key in operations:
                raise DuplicateOperationError(*key)
            operations[key] = operation
    return operations
