"""Problem documents written when an invocation fails.

The fallback response follows the shape of RFC 7807 problem details and is
served with a distinct problem media type, so clients can tell a structured
failure apart from an operation's own responses. The document is minimal on
purpose: failure detail is recorded for operators, not sent to clients.
"""

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field

from hoze.core.types import FieldError

PROBLEM_TYPE_BLANK = "about:blank"


class ProblemDetails(BaseModel):
    """Minimal problem details document."""

    type: str = Field(
        default=PROBLEM_TYPE_BLANK,
        description="URI reference identifying the problem type",
        examples=["about:blank"],
    )

    title: str = Field(
        ...,
        description="Short, human-readable summary of the problem type",
        examples=["Internal Server Error"],
    )

    status: int = Field(
        ...,
        description="HTTP status code of this occurrence",
        examples=[500],
    )

    instance: str | None = Field(
        default=None,
        description="Identifier of this occurrence (the invocation ID)",
        examples=["inv-550e8400-e29b-41d4-a716-446655440000"],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    errors: list[FieldError] | None = Field(
        default=None,
        description=(
            "Field-level request validation errors. Only present when exposing "
            "validation errors is enabled."
        ),
        examples=[[{"loc": ["body", "status"], "msg": "Field required", "type": "missing"}]],
    )

    def to_content(self) -> dict[str, Any]:
        """Serializable content, leaving out unset optional members."""
        return self.model_dump(mode="json", exclude_none=True)


def build_problem(
    status: int,
    *,
    instance: str | None = None,
    correlation_id: str | None = None,
    errors: list[FieldError] | None = None,
) -> ProblemDetails:
    """Build a problem document whose title is the status code's reason phrase.

    Args:
        status: HTTP status code of the problem response.
        instance: Identifier of this occurrence.
        correlation_id: Correlation ID of the request.
        errors: Field-level errors to expose, if any.

    Returns:
        ProblemDetails: The problem document.
    """
    try:
        title = HTTPStatus(status).phrase
    except ValueError:
        title = "Error"
    return ProblemDetails(
        title=title,
        status=status,
        instance=instance,
        correlation_id=correlation_id,
        errors=errors,
    )
