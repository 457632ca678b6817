"""Unit tests for the petstore operations."""

from typing import Any

import orjson
import pytest
from pydantic import ValidationError

from hoze.api.transport import BufferedTransportResponse
from hoze.contract.pipeline import InvocationState, invoke
from hoze.petstore import create_pet, get_pet, petstore_router
from hoze.petstore.schemas import (
    CreatePetRequest,
    GetPetRequest,
    NewPet,
    PetStatus,
)

JSON_HEADERS = {"content-type": "application/json"}


@pytest.mark.unit
class TestPetSchemas:
    """Test the petstore models."""

    def test_integer_age_stays_integer(self) -> None:
        """Whole ages keep their integer form."""
        pet = NewPet(name="Fido", age=2, status=PetStatus.AVAILABLE)

        assert pet.age == 2
        assert isinstance(pet.age, int)

    def test_fractional_age_is_accepted(self) -> None:
        """Ages need not be whole numbers."""
        assert NewPet(name="Fido", age=1.5, status="sold").age == 1.5

    def test_negative_age_is_rejected(self) -> None:
        """Ages below zero are rejected."""
        with pytest.raises(ValidationError):
            NewPet(name="Fido", age=-1, status="available")

    def test_unknown_status_is_rejected(self) -> None:
        """Only the known statuses are accepted."""
        with pytest.raises(ValidationError):
            NewPet(name="Fido", age=2, status="lost")

    def test_pet_id_is_read_by_alias(self) -> None:
        """The path parameter is named ``petId`` on the wire."""
        request = GetPetRequest.model_validate({"path_parameters": {"petId": "5"}})

        assert request.path_parameters.pet_id == 5


@pytest.mark.unit
class TestPetstoreOperations:
    """Test the operation descriptors and their handlers."""

    def test_descriptors(self) -> None:
        """Operations declare the expected schemas and status codes."""
        assert create_pet.request_schema is CreatePetRequest
        assert create_pet.declares_body
        assert create_pet.status_codes == frozenset({200, 405})
        assert get_pet.request_schema is GetPetRequest
        assert not get_pet.declares_body
        assert get_pet.status_codes == frozenset({200, 404})

    async def test_create_pet_assigns_id(self, make_request: Any) -> None:  # noqa: ANN401
        """The created pet echoes the input with the assigned ID."""
        raw_response = BufferedTransportResponse()

        outcome = await invoke(
            make_request(
                headers=JSON_HEADERS,
                raw_body=b'{"name": "Fido", "age": 2, "status": "available"}',
            ),
            raw_response,
            create_pet,
        )

        assert outcome.state is InvocationState.RESPONSE_BOUND
        assert orjson.loads(raw_response.content) == {
            "name": "Fido",
            "age": 2,
            "status": "available",
            "id": 27,
        }

    async def test_get_pet_returns_fido(self, make_request: Any) -> None:  # noqa: ANN401
        """The requested ID is echoed on a fixed pet."""
        raw_response = BufferedTransportResponse()

        await invoke(
            make_request(path_parameters={"petId": "5"}), raw_response, get_pet
        )

        assert raw_response.status_code == 200
        assert orjson.loads(raw_response.content) == {
            "id": 5,
            "age": 2,
            "status": "available",
            "name": "Fido",
        }

    def test_router_serves_both_operations(self) -> None:
        """The router registers POST /pets and GET /pets/{petId}."""
        router = petstore_router()

        assert dict(router.operations) == {
            ("POST", "/pets"): create_pet,
            ("GET", "/pets/{petId}"): get_pet,
        }

    def test_each_router_is_new(self) -> None:
        """Building the router twice gives independent routers."""
        assert petstore_router() is not petstore_router()
