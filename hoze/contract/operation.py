"""Operation descriptors.

An operation is fully described by its request schema, its ordered
before-middleware, its handler, its response schema and its ordered
after-middleware. Descriptors are built once at startup, checked right away,
and shared read-only by every invocation of the route they are registered on.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import UnionType
from typing import (
    Annotated,
    Any,
    Literal,
    TypeAliasType,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel, Field, TypeAdapter

from hoze.contract.models import HozeRequest, HozeResponse, declares_body
from hoze.contract.transport import TransportRequest, TransportResponse
from hoze.core.exceptions import OperationDefinitionError

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

type BeforeMiddleware[RequestT: HozeRequest] = Callable[
    [TransportRequest, TransportResponse, RequestT], Awaitable[None]
]
type AfterMiddleware[RequestT: HozeRequest, ResponseT: HozeResponse] = Callable[
    [TransportRequest, TransportResponse, RequestT, ResponseT], Awaitable[None]
]
type Handler[RequestT: HozeRequest, ResponseT: HozeResponse] = Callable[
    [RequestT], Awaitable[ResponseT | Mapping[str, Any]]
]

# A HozeResponse subclass, or a union of them, optionally wrapped in Annotated
type ResponseSchema = Any


def response_variants(schema: ResponseSchema) -> tuple[type[HozeResponse], ...]:
    """Unpack a response schema into its variant classes.

    Args:
        schema: A response variant class or a union of variant classes.

    Returns:
        tuple[type[HozeResponse], ...]: The variants in declaration order.

    Raises:
        OperationDefinitionError: If a member is not a HozeResponse subclass.
    """
    if isinstance(schema, TypeAliasType):
        schema = schema.__value__
    if get_origin(schema) is Annotated:
        schema = get_args(schema)[0]

    members = get_args(schema) if get_origin(schema) in (Union, UnionType) else (schema,)

    for member in members:
        if not (isinstance(member, type) and issubclass(member, HozeResponse)):
            msg = f"Response variant {member!r} is not a HozeResponse subclass"
            raise OperationDefinitionError(msg, context={"variant": repr(member)})

    return members


def variant_status_codes(variant: type[HozeResponse]) -> tuple[int, ...]:
    """Read the literal status codes a response variant is pinned to.

    Raises:
        OperationDefinitionError: If ``status_code`` is not a Literal of
            valid HTTP status codes.
    """
    annotation = variant.model_fields["status_code"].annotation
    if get_origin(annotation) is not Literal:
        msg = f"{variant.__name__}.status_code must be a Literal status code"
        raise OperationDefinitionError(msg, context={"variant": variant.__name__})

    codes = get_args(annotation)
    for code in codes:
        if (
            not isinstance(code, int)
            or isinstance(code, bool)
            or not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE
        ):
            msg = f"{variant.__name__} declares an invalid status code {code!r}"
            raise OperationDefinitionError(msg, context={"variant": variant.__name__})
    return codes


def mutable_request_parts(request_schema: type[HozeRequest]) -> tuple[str, ...]:
    """Name the request fields declared as models that are not frozen."""
    return tuple(
        name
        for name, info in request_schema.model_fields.items()
        if isinstance(info.annotation, type)
        and issubclass(info.annotation, BaseModel)
        and not info.annotation.model_config.get("frozen", False)
    )


def _build_response_adapter(variants: tuple[type[HozeResponse], ...]) -> TypeAdapter[Any]:
    """Build the validator for a response schema.

    Several variants become a union discriminated by ``status_code``, so a
    response is checked against the variant its status code selects and
    never against a structurally overlapping neighbour.
    """
    if len(variants) == 1:
        return TypeAdapter(variants[0])
    return TypeAdapter(
        Annotated[Union[variants], Field(discriminator="status_code")]  # noqa: UP007
    )


@dataclass(frozen=True, kw_only=True)
class Operation[RequestT: HozeRequest, ResponseT: HozeResponse]:
    """Immutable declaration of one API operation.

    Attributes:
        operation_id: Name used in logs, route names and the OpenAPI document.
        request_schema: HozeRequest subclass the raw request is bound to.
        before_middleware: Steps run in order before the handler.
        handler: Coroutine turning the bound request into a response value.
        response_schema: A HozeResponse variant or a union of variants.
        after_middleware: Steps run in order after the handler.
        summary: Optional one-line description for the OpenAPI document.
    """

    operation_id: str
    request_schema: type[RequestT]
    before_middleware: Sequence[BeforeMiddleware[RequestT]] = ()
    handler: Handler[RequestT, ResponseT]
    response_schema: ResponseSchema
    after_middleware: Sequence[AfterMiddleware[RequestT, ResponseT]] = ()
    summary: str | None = None

    response_variants: tuple[type[HozeResponse], ...] = field(
        init=False, repr=False, compare=False
    )
    response_adapter: TypeAdapter[Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not (
            isinstance(self.request_schema, type)
            and issubclass(self.request_schema, HozeRequest)
        ):
            msg = f"Operation '{self.operation_id}' request schema must subclass HozeRequest"
            raise OperationDefinitionError(
                msg, context={"operation_id": self.operation_id}
            )

        mutable = mutable_request_parts(self.request_schema)
        if mutable:
            msg = (
                f"Operation '{self.operation_id}' request schema declares "
                f"mutable models for {', '.join(mutable)}; declare them frozen"
            )
            raise OperationDefinitionError(
                msg, context={"operation_id": self.operation_id, "fields": list(mutable)}
            )

        variants = response_variants(self.response_schema)
        seen: dict[int, str] = {}
        for variant in variants:
            for code in variant_status_codes(variant):
                if code in seen:
                    msg = (
                        f"Operation '{self.operation_id}' declares status {code} "
                        f"in both {seen[code]} and {variant.__name__}"
                    )
                    raise OperationDefinitionError(
                        msg,
                        context={"operation_id": self.operation_id, "status": code},
                    )
                seen[code] = variant.__name__

        # Frozen dataclass: derived fields are set once, here
        object.__setattr__(self, "before_middleware", tuple(self.before_middleware))
        object.__setattr__(self, "after_middleware", tuple(self.after_middleware))
        object.__setattr__(self, "response_variants", variants)
        object.__setattr__(self, "response_adapter", _build_response_adapter(variants))

    @property
    def declares_body(self) -> bool:
        """Whether the request schema expects a body."""
        return declares_body(self.request_schema)

    @property
    def status_codes(self) -> frozenset[int]:
        """Every status code the response schema allows."""
        return frozenset(
            code
            for variant in self.response_variants
            for code in variant_status_codes(variant)
        )
