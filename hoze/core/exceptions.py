"""Structured exception hierarchy for consistent error handling.

This module defines the exception system for Hoze. Every failure the
invocation pipeline can observe is either raised as, or wrapped into, one of
these exceptions so it can be logged with rich context and translated into a
single fallback response.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **HozeError**: Base exception with rich context and fingerprinting
- **Specialized exceptions**: Schema binding, transport and definition errors
- **InvocationError**: The pipeline's failure channel, naming the failed step
"""

import hashlib
import traceback
from enum import Enum

from hoze.core.types import ErrorContext, FieldError


class ErrorCode(Enum):
    """Standardized error codes for the Hoze application."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    # Schema binding errors
    REQUEST_VALIDATION_ERROR = "REQUEST_VALIDATION_ERROR"
    """The inbound request does not conform to the operation's request schema."""

    RESPONSE_VALIDATION_ERROR = "RESPONSE_VALIDATION_ERROR"
    """The handler's response does not conform to the operation's response schema."""

    MALFORMED_BODY = "MALFORMED_BODY"
    """The request body could not be decoded from its declared media type."""

    # Operation definition errors
    INVALID_OPERATION = "INVALID_OPERATION"
    """An operation descriptor is not well formed."""

    DUPLICATE_OPERATION = "DUPLICATE_OPERATION"
    """An operation is already registered for the same method and path."""

    # Transport errors
    RESPONSE_ALREADY_SENT = "RESPONSE_ALREADY_SENT"
    """A write was attempted on a response that has already been finished."""

    # Pipeline errors
    INVOCATION_FAILED = "INVOCATION_FAILED"
    """An operation invocation failed at one of its steps."""


class Severity(Enum):
    """Severity levels for errors in the Hoze application."""

    LOW = "LOW"
    """Low severity errors that don't significantly impact functionality."""

    MEDIUM = "MEDIUM"
    """Medium severity errors that may affect some features but not critical ops."""

    HIGH = "HIGH"
    """High severity errors impacting critical functionality or data integrity."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention, may cause system failures."""


class HozeError(Exception):
    """Base exception class for all Hoze application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash of the error type, code and the raising location.
        """
        max_frames = 5
        relevant_frames = (
            self.stack_trace[-max_frames:]
            if len(self.stack_trace) > max_frames
            else self.stack_trace
        )

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"

        for frame in relevant_frames:
            if "site-packages" not in frame and "hoze/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def should_alert(self) -> bool:
        """Whether this error should trigger alerts (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class SchemaValidationError(HozeError):
    """A candidate value did not conform to a declared schema.

    Carries the field-level failures reported by the schema validator, each
    with the location of the offending field, a message and a failure type.

    Args:
        message: Description of the validation failure
        errors: Field-level failures (``loc``, ``msg``, ``type``)
        error_code: Error code for the concrete failure
        severity: Severity level of the failure
        context: Additional context information about the error
        cause: The original validator exception
    """

    def __init__(
        self,
        message: str,
        errors: list[FieldError] | None = None,
        error_code: str | ErrorCode = ErrorCode.REQUEST_VALIDATION_ERROR,
        severity: Severity = Severity.LOW,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.errors = errors or []
        super().__init__(error_code, message, severity, context, cause)


class RequestBindingError(SchemaValidationError):
    """The inbound request does not conform to the operation's request schema."""

    def __init__(
        self,
        message: str,
        errors: list[FieldError] | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            errors,
            ErrorCode.REQUEST_VALIDATION_ERROR,
            Severity.LOW,
            context,
            cause,
        )


class ResponseBindingError(SchemaValidationError):
    """The handler returned a response outside the operation's contract.

    This is a programming error in the handler, hence the HIGH severity.
    """

    def __init__(
        self,
        message: str,
        errors: list[FieldError] | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            errors,
            ErrorCode.RESPONSE_VALIDATION_ERROR,
            Severity.HIGH,
            context,
            cause,
        )


class MalformedBodyError(HozeError):
    """The request body could not be decoded from its declared media type."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.MALFORMED_BODY, message, Severity.LOW, context, cause)


class OperationDefinitionError(HozeError):
    """An operation descriptor is not well formed.

    Raised at registration time, before any request is served.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.INVALID_OPERATION,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.CRITICAL, context)


class DuplicateOperationError(OperationDefinitionError):
    """An operation is already registered for the same method and path."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(
            f"An operation is already registered for {method} {path}",
            ErrorCode.DUPLICATE_OPERATION,
            {"method": method, "path": path},
        )


class ResponseAlreadySentError(HozeError):
    """A write was attempted on a transport response that has been finished."""

    def __init__(self, attempted: str) -> None:
        super().__init__(
            ErrorCode.RESPONSE_ALREADY_SENT,
            f"Cannot {attempted}: the response has already been sent",
            Severity.MEDIUM,
            {"attempted": attempted},
        )


class InvocationError(HozeError):
    """An operation invocation failed.

    Wraps the first failure raised by any step of the pipeline. The wrapped
    exception is available as ``cause`` and the step that raised it as
    ``step``; ``middleware_index`` is set when the step is a middleware.

    Args:
        operation_id: The operation being invoked
        step: Name of the pipeline step that failed
        cause: The exception raised by the step
        middleware_index: Position of the failing middleware, if any
    """

    def __init__(
        self,
        operation_id: str,
        step: str,
        cause: Exception,
        middleware_index: int | None = None,
    ) -> None:
        self.operation_id = operation_id
        self.step = step
        self.middleware_index = middleware_index

        severity = cause.severity if isinstance(cause, HozeError) else Severity.HIGH
        context: ErrorContext = {"operation_id": operation_id, "step": step}
        if middleware_index is not None:
            context["middleware_index"] = middleware_index

        super().__init__(
            ErrorCode.INVOCATION_FAILED,
            f"Operation '{operation_id}' failed during {step}: {cause}",
            severity,
            context,
            cause,
        )
