"""Petstore operation descriptors and their router."""

from typing import Any

from hoze.api.routing import OperationRouter
from hoze.contract.operation import Operation
from hoze.petstore.schemas import (
    CreatePetRequest,
    CreatePetResponse,
    GetPet200Response,
    GetPetRequest,
    GetPetResponse,
    Pet,
    PetStatus,
)

ASSIGNED_PET_ID = 27


async def create_pet_handler(request: CreatePetRequest) -> dict[str, Any]:
    # Keys the response schema does not declare are dropped when it is bound
    return {
        "status_code": 200,
        "body": {
            **request.body.model_dump(mode="json"),
            "id": ASSIGNED_PET_ID,
            "j": 1,
        },
    }


async def get_pet_handler(request: GetPetRequest) -> GetPet200Response:
    return GetPet200Response(
        body=Pet(
            id=request.path_parameters.pet_id,
            age=2,
            status=PetStatus.AVAILABLE,
            name="Fido",
        )
    )


create_pet: Operation[CreatePetRequest, Any] = Operation(
    operation_id="create_pet",
    summary="Add a pet to the store",
    request_schema=CreatePetRequest,
    handler=create_pet_handler,
    response_schema=CreatePetResponse,
)

get_pet: Operation[GetPetRequest, Any] = Operation(
    operation_id="get_pet",
    summary="Find a pet by ID",
    request_schema=GetPetRequest,
    handler=get_pet_handler,
    response_schema=GetPetResponse,
)


def petstore_router() -> OperationRouter:
    """Build a router serving the petstore operations.

    A new router is built on each call, so several applications can be
    created in one process.
    """
    router = OperationRouter(tags=["pets"])
    router.add_operation("POST", "/pets", create_pet)
    router.add_operation("GET", "/pets/{petId}", get_pet)
    return router
