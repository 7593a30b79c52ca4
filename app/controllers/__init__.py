"""FastAPI routers acting as controllers in the MVC architecture."""

from . import convert

__all__ = ["convert"]
