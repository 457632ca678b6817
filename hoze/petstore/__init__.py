"""Petstore example operations.

Two operations that exercise the invocation pipeline end to end: creating a
pet from a JSON body and fetching a pet by a numeric path parameter.
"""

from hoze.petstore.operations import create_pet, get_pet, petstore_router

__all__ = ["create_pet", "get_pet", "petstore_router"]
