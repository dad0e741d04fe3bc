"""Pydantic schemas for API validation."""

from .folder import (
    FolderCreate,
    FolderUpdate,
    FolderResponse,
    FolderListEntry,
    FolderDetailResponse,
    FolderItemResponse,
    FolderTreeNode,
    AddItemsRequest,
    MoveItemsRequest,
    ReorderItemsRequest,
    ItemsUpdateRequest,
)
from .template import FolderTemplateCreate, FolderTemplateResponse

__all__ = [
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "FolderListEntry",
    "FolderDetailResponse",
    "FolderItemResponse",
    "FolderTreeNode",
    "AddItemsRequest",
    "MoveItemsRequest",
    "ReorderItemsRequest",
    "ItemsUpdateRequest",
    "FolderTemplateCreate",
    "FolderTemplateResponse",
]
