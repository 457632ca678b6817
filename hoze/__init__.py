"""Hoze - type-safe, composable and testable HTTP API operations.

Hoze sits between an HTTP transport and application handler functions. For
each request it binds and validates the inbound request against a declared
schema, runs the operation's middleware and handler, validates the outbound
response against a declared schema and serializes it.

Architecture Overview:
- **Contract Layer**: Operation descriptors, binders and the invocation pipeline
- **API Layer**: FastAPI transport adapter, route registration and middleware
- **Core Layer**: Configuration, logging, exceptions and request context
- **Petstore**: Example operations exercising the pipeline

Every failure inside an invocation is caught at a single boundary and turned
into one fallback problem response, so handler authors only ever deal with
validated values.
"""
