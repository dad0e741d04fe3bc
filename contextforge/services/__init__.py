"""Business logic services."""

from .folder_events import FolderEvent, FolderEventBus, folder_events
from .folder_service import FolderService
from .folder_store import FolderStore
from .item_links import ItemFolderLinkManager
from .path_propagator import DescendantPathPropagator
from .template_service import FolderTemplateService

__all__ = [
    "DescendantPathPropagator",
    "FolderEvent",
    "FolderEventBus",
    "FolderService",
    "FolderStore",
    "FolderTemplateService",
    "ItemFolderLinkManager",
    "folder_events",
]
