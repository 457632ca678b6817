"""Petstore request and response schemas."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt

from hoze.contract.models import HozeRequest, HozeResponse


class PetStatus(StrEnum):
    """Availability of a pet in the store."""

    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"


class NewPet(BaseModel):
    """A pet as submitted by a client, before it has an ID."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the pet", examples=["Fido"])
    age: NonNegativeInt | NonNegativeFloat = Field(
        ..., description="Age in years", examples=[2]
    )
    status: PetStatus = Field(..., description="Availability in the store")


class Pet(NewPet):
    """A stored pet."""

    id: int = Field(..., ge=0, description="Pet identifier", examples=[27])


# POST /pets


class CreatePetRequest(HozeRequest):
    body: NewPet


class CreatePet200Response(HozeResponse):
    status_code: Literal[200] = 200
    headers: None = None
    body: Pet


class CreatePet405Response(HozeResponse):
    status_code: Literal[405] = 405
    headers: None = None
    body: None = None


type CreatePetResponse = CreatePet200Response | CreatePet405Response


# GET /pets/{petId}


class GetPetPathParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    pet_id: int = Field(..., alias="petId", ge=0, description="Pet identifier")


class GetPetRequest(HozeRequest):
    path_parameters: GetPetPathParameters


class GetPet200Response(HozeResponse):
    status_code: Literal[200] = 200
    headers: None = None
    body: Pet


class GetPet404Response(HozeResponse):
    status_code: Literal[404] = 404
    headers: None = None
    body: None = None


type GetPetResponse = GetPet200Response | GetPet404Response
