"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Content types
JSON_CONTENT_TYPES = frozenset({"application/json", "text/json"})
TEXT_CONTENT_TYPES = frozenset(
    {"text/plain", "text/html", "text/xml", "text/csv", "application/xml"}
)

# Request logging
MAX_USER_AGENT_LENGTH = 200
