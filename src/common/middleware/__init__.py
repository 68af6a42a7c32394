"""Common middleware for the awards backend."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
