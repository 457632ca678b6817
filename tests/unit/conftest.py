"""Shared fixtures for unit tests."""

import os
from collections.abc import Callable, Generator
from typing import Any, Literal

import pytest
from pydantic import BaseModel, ConfigDict, Field

from hoze.api.transport import BufferedTransportResponse, StarletteTransportRequest
from hoze.contract.models import HozeRequest, HozeResponse
from hoze.contract.operation import Operation
from hoze.core.config import Settings, get_settings
from hoze.core.error_context import _get_sensitive_fields

type RequestFactory = Callable[..., StarletteTransportRequest]


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int = Field(ge=0)


class ItemPathParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: int = Field(alias="itemId", ge=0)


class CreateItemRequest(HozeRequest):
    body: Item


class GetItemRequest(HozeRequest):
    path_parameters: ItemPathParameters


class Item200Response(HozeResponse):
    status_code: Literal[200] = 200
    headers: None = None
    body: Item


class Item404Response(HozeResponse):
    status_code: Literal[404] = 404
    headers: None = None
    body: None = None


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object built from test environment variables.

    Returns:
        Settings: Settings object with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")

    return Settings()


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings before and after each test to ensure isolation."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Remove app-specific environment variables for the duration of a test.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    original_env = os.environ.copy()

    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "SHUTDOWN_",
        "LOG_CONFIG__",
        "PIPELINE_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def make_request() -> RequestFactory:
    """Factory for raw transport requests.

    Usage:
        raw_request = make_request(path_parameters={"itemId": "5"})
    """

    def _make(
        *,
        path_parameters: dict[str, str] | None = None,
        query_parameters: dict[str, str | list[str]] | None = None,
        headers: dict[str, str] | None = None,
        raw_body: bytes = b"",
    ) -> StarletteTransportRequest:
        return StarletteTransportRequest(
            path_parameters=path_parameters or {},
            query_parameters=query_parameters or {},
            headers=headers or {},
            raw_body=raw_body,
        )

    return _make


@pytest.fixture
def raw_response() -> BufferedTransportResponse:
    """A fresh, unfinished transport response."""
    return BufferedTransportResponse()


@pytest.fixture
def create_item_operation() -> Operation[CreateItemRequest, Any]:
    """Operation echoing its body back with a 200 response."""

    async def handler(request: CreateItemRequest) -> Item200Response:
        return Item200Response(body=request.body)

    return Operation(
        operation_id="create_item",
        request_schema=CreateItemRequest,
        handler=handler,
        response_schema=Item200Response | Item404Response,
    )


@pytest.fixture
def get_item_operation() -> Operation[GetItemRequest, Any]:
    """Operation returning 404 for item 0 and a fixed item otherwise."""

    async def handler(request: GetItemRequest) -> dict[str, Any]:
        if request.path_parameters.item_id == 0:
            return {"status_code": 404}
        return {"status_code": 200, "body": {"name": "widget", "quantity": 3}}

    return Operation(
        operation_id="get_item",
        request_schema=GetItemRequest,
        handler=handler,
        response_schema=Item200Response | Item404Response,
    )
