"""Utility modules for API-specific functionality.

- **responses**: orjson-backed JSON and problem response classes
"""
