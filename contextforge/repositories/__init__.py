"""Data access repositories."""

from .base import BaseRepository
from .folder_repository import FolderRepository
from .item_repository import ItemRepository
from .link_repository import LinkRepository
from .template_repository import TemplateRepository

__all__ = [
    "BaseRepository",
    "FolderRepository",
    "ItemRepository",
    "LinkRepository",
    "TemplateRepository",
]
