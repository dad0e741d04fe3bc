"""API routes."""

from .folders import router as folders_router

__all__ = ["folders_router"]
