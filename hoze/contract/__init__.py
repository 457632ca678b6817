"""Contract layer: operation descriptors and the invocation pipeline.

- **models**: Base request and response shapes
- **operation**: Immutable operation descriptors, checked at startup
- **transport**: Protocols a transport adapter implements
- **binding**: Request, response and problem binders
- **problems**: Problem documents for the fallback response
- **pipeline**: Runs one invocation and owns its single failure boundary

Nothing in this package depends on a particular HTTP framework.
"""
