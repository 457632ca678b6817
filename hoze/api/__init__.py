"""HTTP API layer with FastAPI for the Hoze platform.

This package is the transport adapter around the contract layer:

- **main**: Application factory and lifecycle management
- **routing**: Registration of operations on method + path pairs
- **transport**: Starlette views implementing the transport contract
- **middleware**: Cross-cutting concerns for all requests
  - Request context with correlation ID tracking
  - Structured logging with performance metrics
  - Problem responses for failures outside any operation
- **utils**: High-performance JSON serialization with orjson

Operations themselves never see Starlette objects; they only receive the
validated request values produced by the pipeline.
"""
