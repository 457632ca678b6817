"""FastAPI middleware package for cross-cutting request/response concerns.

- **RequestContextMiddleware**: Manages correlation IDs and request context
- **RequestLoggingMiddleware**: Structured logging with performance tracking
- **error_handler**: Problem responses for failures outside any operation

Operation failures never reach these layers: the invocation pipeline turns
them into problem responses itself. The exception handlers only cover what
happens around operations (unknown routes, wrong methods, adapter errors).
"""
