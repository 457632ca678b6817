"""Request and response shapes shared by every operation.

A request value always has the same four named fields, and a response value
always has a status code, optional headers and a body. Concrete operations
specialize these shapes by subclassing:

    class GetPetPathParameters(BaseModel):
        model_config = ConfigDict(frozen=True)

        pet_id: int = Field(alias="petId", ge=0)

    class GetPetRequest(HozeRequest):
        path_parameters: GetPetPathParameters

    class GetPet200Response(HozeResponse):
        status_code: Literal[200] = 200
        body: Pet

The pipeline itself only ever sees the unparameterized base shapes.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

REQUEST_FIELDS = (
    "path_parameters",
    "header_parameters",
    "query_string_parameters",
)
BODY_FIELD = "body"


class NoParameters(BaseModel):
    """Parameter group for operations that declare no parameters of a kind.

    Every raw value is tolerated and dropped.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)


class HozeRequest(BaseModel):
    """A bound request value.

    The base class declares no ``body`` field. Subclasses that expect a body
    declare one, which is how the request binder tells "no body expected"
    apart from "body expected but empty".

    Freezing is shallow: a bound request is only immutable all the way down
    when the parameter and body models it declares are frozen as well.
    ``Operation`` rejects request schemas declaring parameter or body models
    that are not frozen.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    path_parameters: NoParameters = Field(default_factory=NoParameters)
    header_parameters: NoParameters = Field(default_factory=NoParameters)
    query_string_parameters: NoParameters = Field(default_factory=NoParameters)


class HozeResponse(BaseModel):
    """A response value returned by a handler.

    Concrete variants pin ``status_code`` to a ``Literal`` so a response
    schema made of several variants can be discriminated by status code.

    Response values cannot be reassigned once built, and instances are
    validated again whenever they are bound, so a value assembled with
    ``model_construct`` gets no pass.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, revalidate_instances="always")

    status_code: int
    headers: Mapping[str, Any] | None = None
    body: Any = None


def declares_body(request_schema: type[HozeRequest]) -> bool:
    """Whether a request schema expects a body."""
    return BODY_FIELD in request_schema.model_fields
