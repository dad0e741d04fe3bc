"""Database models."""

from .folder import Folder, ItemFolderLink
from .item import Item
from .template import FolderTemplate
from .user import User, AuditLog

__all__ = ["Folder", "ItemFolderLink", "Item", "FolderTemplate", "User", "AuditLog"]
