"""ASGI middleware package."""
