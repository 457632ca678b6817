"""High-performance JSON response classes using orjson serialization.

ORJSONResponse is the default response class of the application, used by
the service endpoints. ProblemJSONResponse renders problem documents for
failures that happen outside any operation, such as unknown routes.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hoze.core.constants import JSON_MEDIA_TYPE, PROBLEM_JSON_MEDIA_TYPE


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)


class ProblemJSONResponse(ORJSONResponse):
    """ORJSONResponse served with the problem details media type."""

    media_type = PROBLEM_JSON_MEDIA_TYPE
