"""Type aliases for dynamic data structures throughout the application.

All types defined here should be JSON-serializable to support logging,
API responses and the problem documents written by the pipeline.
"""

from typing import Any

# Context dictionary for logging additional information
type LogContext = dict[str, Any]

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]

# Field-level schema failure as reported to operators (loc, msg, type)
type FieldError = dict[str, Any]
