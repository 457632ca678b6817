"""Starlette implementation of the transport adapter contract.

- **StarletteTransportRequest**: exposes path, query, header and body values
  of a Starlette request in the shape the request binder expects
- **BufferedTransportResponse**: collects what the pipeline writes and turns
  it into the Starlette response returned by the route
"""

from collections.abc import Mapping
from functools import cached_property
from typing import Any, Self

import orjson
from starlette.requests import Request
from starlette.responses import Response

from hoze.api.constants import JSON_CONTENT_TYPES, TEXT_CONTENT_TYPES
from hoze.core.exceptions import MalformedBodyError, ResponseAlreadySentError


def _media_type(content_type: str) -> str:
    """Strip parameters such as charset from a Content-Type value."""
    return content_type.split(";", 1)[0].strip().lower()


def is_json_media_type(media_type: str) -> bool:
    """Whether a media type carries JSON, including ``+json`` suffixes."""
    return media_type in JSON_CONTENT_TYPES or media_type.endswith("+json")


class StarletteTransportRequest:
    """Raw request view over a Starlette request.

    The body is read eagerly by ``from_request`` but decoded lazily, so a
    malformed body only fails operations that declare one.

    Args:
        path_parameters: Values captured by the route's path pattern.
        query_parameters: Query-string values; repeated keys map to a list.
        headers: Header fields keyed by lower-cased name.
        raw_body: The undecoded request body.
    """

    def __init__(
        self,
        *,
        path_parameters: Mapping[str, str],
        query_parameters: Mapping[str, str | list[str]],
        headers: Mapping[str, str],
        raw_body: bytes = b"",
    ) -> None:
        self._path_parameters = dict(path_parameters)
        self._query_parameters = dict(query_parameters)
        self._headers = {key.lower(): value for key, value in headers.items()}
        self._raw_body = raw_body

    @classmethod
    async def from_request(cls, request: Request) -> Self:
        """Capture everything the pipeline may need from a Starlette request.

        Args:
            request: The incoming Starlette request.

        Returns:
            Self: The transport request.
        """
        query_parameters: dict[str, str | list[str]] = {}
        for key in request.query_params:
            values = request.query_params.getlist(key)
            query_parameters[key] = values[0] if len(values) == 1 else values

        return cls(
            path_parameters={
                key: str(value) for key, value in request.path_params.items()
            },
            query_parameters=query_parameters,
            headers=dict(request.headers.items()),
            raw_body=await request.body(),
        )

    @property
    def path_parameters(self) -> Mapping[str, str]:
        return self._path_parameters

    @property
    def query_parameters(self) -> Mapping[str, str | list[str]]:
        return self._query_parameters

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def media_type(self) -> str:
        """Media type of the body, without parameters."""
        return _media_type(self._headers.get("content-type", ""))

    @cached_property
    def body(self) -> Any:  # noqa: ANN401 - the decoded body is format-agnostic
        """The decoded body.

        Empty bodies decode to None, JSON media types through orjson, text
        media types to ``str``; anything else is passed on as bytes.

        Raises:
            MalformedBodyError: If the body cannot be decoded.
        """
        if not self._raw_body:
            return None

        media_type = self.media_type
        try:
            if is_json_media_type(media_type):
                return orjson.loads(self._raw_body)
            if media_type in TEXT_CONTENT_TYPES:
                return self._raw_body.decode("utf-8")
        except (orjson.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"Request body is not valid {media_type}"
            raise MalformedBodyError(
                msg, context={"media_type": media_type}, cause=exc
            ) from exc
        return self._raw_body


class BufferedTransportResponse:
    """Raw response that buffers writes until the route returns.

    Any write after ``end`` raises ResponseAlreadySentError.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.headers: dict[str, str] = {}
        self.media_type: str | None = None
        self.content = b""
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def _ensure_open(self, attempted: str) -> None:
        if self._finished:
            raise ResponseAlreadySentError(attempted)

    def set_header(self, key: str, value: str) -> None:
        self._ensure_open(f"set header '{key}'")
        self.headers[key] = value

    def set_status(self, code: int) -> None:
        self._ensure_open("set status")
        self.status_code = code

    def set_content_type(self, mime: str) -> None:
        self._ensure_open("set content type")
        self.media_type = mime

    def write_body(self, payload: bytes) -> None:
        self._ensure_open("write body")
        self.content = payload

    def end(self) -> None:
        self._ensure_open("end response")
        self._finished = True

    def to_starlette(self) -> Response:
        """Build the Starlette response to return from the route."""
        return Response(
            content=self.content,
            status_code=self.status_code,
            headers=self.headers,
            media_type=self.media_type,
        )
