"""Binders between raw transport values and validated request/response values.

- **bind_request**: assembles path, header, query and body values from the raw
  request and validates them against the operation's request schema
- **bind_response**: validates the handler's response value against the
  operation's response schema and writes it onto the raw response
- **bind_problem**: writes the fallback problem response

Binders never coerce anything themselves. Declared coercions (such as a
numeric path parameter arriving as text) happen inside schema validation.
"""

from typing import Any

import orjson
from pydantic import ValidationError as PydanticValidationError

from hoze.contract.models import BODY_FIELD, HozeRequest, HozeResponse
from hoze.contract.operation import Operation
from hoze.contract.problems import ProblemDetails
from hoze.contract.transport import TransportRequest, TransportResponse
from hoze.core.constants import JSON_MEDIA_TYPE, PROBLEM_JSON_MEDIA_TYPE
from hoze.core.exceptions import RequestBindingError, ResponseBindingError
from hoze.core.types import FieldError


def field_errors(exc: PydanticValidationError) -> list[FieldError]:
    """Reduce a validator failure to location, message and type per field.

    The offending input is left out so values never reach the logs or the
    client through this path.
    """
    return [
        {
            "loc": [str(part) for part in error["loc"]],
            "msg": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors(include_url=False, include_input=False)
    ]


def _stringify_header(value: Any) -> str:  # noqa: ANN401 - header values are declared per variant
    """Render a header value the way it goes on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def bind_request[RequestT: HozeRequest](
    raw_request: TransportRequest, operation: Operation[RequestT, Any]
) -> RequestT:
    """Bind a raw request to the operation's request schema.

    The body is only read, and only included in the candidate, when the
    schema declares one. Raw values not mentioned by the schema are ignored.

    Args:
        raw_request: The raw transport request.
        operation: The operation being invoked.

    Returns:
        RequestT: The validated, immutable request value.

    Raises:
        RequestBindingError: If the candidate does not conform to the schema.
        MalformedBodyError: If the adapter cannot decode a declared body.
    """
    candidate: dict[str, Any] = {
        "path_parameters": dict(raw_request.path_parameters),
        "header_parameters": dict(raw_request.headers),
        "query_string_parameters": dict(raw_request.query_parameters),
    }
    if operation.declares_body:
        candidate[BODY_FIELD] = raw_request.body

    try:
        return operation.request_schema.model_validate(candidate)
    except PydanticValidationError as exc:
        errors = field_errors(exc)
        msg = (
            f"Request does not conform to {operation.request_schema.__name__} "
            f"({len(errors)} error(s))"
        )
        raise RequestBindingError(
            msg,
            errors=errors,
            context={"operation_id": operation.operation_id},
            cause=exc,
        ) from exc


def validate_response[ResponseT: HozeResponse](
    operation: Operation[Any, ResponseT], response_value: Any  # noqa: ANN401 - handlers may return mappings
) -> ResponseT:
    """Validate a handler's response value against the response schema.

    Raises:
        ResponseBindingError: If no variant accepts the response value.
    """
    try:
        return operation.response_adapter.validate_python(response_value)
    except PydanticValidationError as exc:
        errors = field_errors(exc)
        msg = (
            f"Handler response does not conform to the response schema of "
            f"'{operation.operation_id}' ({len(errors)} error(s))"
        )
        raise ResponseBindingError(
            msg,
            errors=errors,
            context={
                "operation_id": operation.operation_id,
                "declared_status_codes": sorted(operation.status_codes),
            },
            cause=exc,
        ) from exc


def bind_response(
    raw_response: TransportResponse,
    operation: Operation[Any, Any],
    response_value: Any,  # noqa: ANN401 - handlers may return mappings
) -> None:
    """Validate a response value and write it onto the raw response.

    Validation completes before the first write, so a non-conforming
    response leaves the raw response untouched.

    Args:
        raw_response: The raw transport response.
        operation: The operation being invoked.
        response_value: The value returned by the handler.

    Raises:
        ResponseBindingError: If the value does not conform to the schema.
    """
    validated = validate_response(operation, response_value)
    payload = operation.response_adapter.dump_python(
        validated, mode="json", by_alias=True
    )

    for header, value in (payload.get("headers") or {}).items():
        if value is not None:
            raw_response.set_header(str(header), _stringify_header(value))

    raw_response.set_status(payload["status_code"])
    raw_response.set_content_type(JSON_MEDIA_TYPE)

    body = payload.get(BODY_FIELD)
    if body is not None:
        raw_response.write_body(orjson.dumps(body))

    raw_response.end()


def bind_problem(
    raw_response: TransportResponse,
    problem: ProblemDetails,
    content_type: str = PROBLEM_JSON_MEDIA_TYPE,
) -> bool:
    """Write the fallback problem response.

    Writing is skipped when the response has already been finished, which
    makes the fallback safe to attempt more than once.

    Args:
        raw_response: The raw transport response.
        problem: The problem document to write.
        content_type: Problem media type.

    Returns:
        bool: True if the problem response was written.
    """
    if raw_response.finished:
        return False

    raw_response.set_status(problem.status)
    raw_response.set_content_type(content_type)
    raw_response.write_body(orjson.dumps(problem.to_content()))
    raw_response.end()
    return True
