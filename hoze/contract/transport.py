"""Transport adapter contract.

The pipeline never talks to an HTTP server directly. A transport adapter
hands it a raw request exposing already-parsed parts and a raw response it
can write to, and does not touch the raw response until ``invoke`` returns.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TransportRequest(Protocol):
    """Raw inbound request as provided by the transport adapter."""

    @property
    def path_parameters(self) -> Mapping[str, str]:
        """Values captured by the route's path pattern."""
        ...

    @property
    def query_parameters(self) -> Mapping[str, str | list[str]]:
        """Query-string values; repeated keys map to a list."""
        ...

    @property
    def headers(self) -> Mapping[str, str]:
        """Header fields keyed by lower-cased name."""
        ...

    @property
    def body(self) -> Any:  # noqa: ANN401 - the decoded body is format-agnostic
        """The request body, already decoded by the adapter."""
        ...


@runtime_checkable
class TransportResponse(Protocol):
    """Raw outbound response the pipeline writes to."""

    @property
    def finished(self) -> bool:
        """Whether ``end`` has been called."""
        ...

    def set_header(self, key: str, value: str) -> None:
        """Set a response header."""
        ...

    def set_status(self, code: int) -> None:
        """Set the response status code."""
        ...

    def set_content_type(self, mime: str) -> None:
        """Set the response media type."""
        ...

    def write_body(self, payload: bytes) -> None:
        """Set the serialized response body, replacing anything written before."""
        ...

    def end(self) -> None:
        """Finish the response; no further writes are allowed."""
        ...
