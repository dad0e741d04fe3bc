"""Async client for the folder API and its on-disk configuration."""

from .api_client import ApiError, FolderClient
from .config import DEFAULT_CONFIG_PATH, ClientConfig

__all__ = ["ApiError", "ClientConfig", "DEFAULT_CONFIG_PATH", "FolderClient"]
