"""Ordered membership of context items in folders.

An item can sit in several folders; each membership is one
``ItemFolderLink`` row with its own position. Every operation here is
owner-scoped, flushes and leaves the commit to the caller.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..exceptions import FolderNotFoundError, ItemsNotFoundError
from ..models.folder import Folder, ItemFolderLink
from ..repositories.folder_repository import FolderRepository
from ..repositories.item_repository import ItemRepository
from ..repositories.link_repository import LinkRepository

logger = logging.getLogger(__name__)


def _dedupe(item_ids: Iterable[str]) -> List[str]:
    """Drop repeated ids, keeping the first occurrence of each."""
    return list(dict.fromkeys(item_ids))


class ItemFolderLinkManager:
    """Adds, moves, reorders and removes item links."""

    def __init__(self, db: Session):
        self.db = db
        self.folders = FolderRepository(db)
        self.items = ItemRepository(db)
        self.links = LinkRepository(db)

    def _owned_folder(self, owner_id: str, folder_id: str, label: str = "Folder") -> Folder:
        folder = self.folders.get_owned_optional(owner_id, folder_id)
        if folder is None:
            raise FolderNotFoundError(folder_id, label=label)
        return folder

    def add_items(
        self,
        owner_id: str,
        folder_id: str,
        item_ids: List[str],
        position: Optional[int] = None,
    ) -> int:
        """Link items into a folder at consecutive positions.

        Without *position* the items go after the current last one (an empty
        folder starts at 1). Already linked items are moved to their new
        position rather than duplicated. All-or-nothing: if any id is not an
        item of this owner nothing is written.
        """
        self._owned_folder(owner_id, folder_id)
        ids = _dedupe(item_ids)

        found = self.items.find_owned_ids(owner_id, ids)
        missing = [item_id for item_id in ids if item_id not in found]
        if missing:
            raise ItemsNotFoundError(missing)

        if position is None:
            position = (self.links.max_position(folder_id) or 0) + 1

        existing = self.links.get_many(folder_id, ids)
        for offset, item_id in enumerate(ids):
            link = existing.get(item_id)
            if link is not None:
                link.position = position + offset
            else:
                self.links.create(item_id, folder_id, position + offset)

        self.db.flush()
        logger.info(
            "Items added to folder",
            extra={"owner_id": owner_id, "folder_id": folder_id, "count": len(ids)},
        )
        return len(ids)

    def move_items(
        self,
        owner_id: str,
        source_folder_id: str,
        target_folder_id: str,
        item_ids: List[str],
        position: Optional[int] = None,
    ) -> int:
        """Move links from one folder to another. Unlinked ids are skipped.

        Every moved item takes *position* (0 when omitted). An item already
        present in the target keeps its target link at the new position and
        loses the source link.
        """
        self._owned_folder(owner_id, source_folder_id, label="Source folder")
        self._owned_folder(owner_id, target_folder_id, label="Target folder")
        new_position = position if position is not None else 0

        ids = _dedupe(item_ids)
        source_links = self.links.get_many(source_folder_id, ids)

        if source_folder_id == target_folder_id:
            for link in source_links.values():
                link.position = new_position
            moved = len(source_links)
        else:
            target_links = self.links.get_many(target_folder_id, list(source_links))
            moved = 0
            for item_id in ids:
                link = source_links.get(item_id)
                if link is None:
                    continue
                # folder_id is part of the primary key, so the link is re-created.
                self.links.delete(link)
                already_there = target_links.get(item_id)
                if already_there is not None:
                    already_there.position = new_position
                else:
                    self.links.create(item_id, target_folder_id, new_position)
                moved += 1

        self.db.flush()
        logger.info(
            "Items moved between folders",
            extra={
                "owner_id": owner_id,
                "source_folder_id": source_folder_id,
                "target_folder_id": target_folder_id,
                "count": moved,
            },
        )
        return moved

    def reorder_items(self, owner_id: str, folder_id: str, item_positions: List[Dict]) -> int:
        """Set explicit positions. Each entry is ``{"item_id", "position"}``."""
        self._owned_folder(owner_id, folder_id)

        wanted = {entry["item_id"]: entry["position"] for entry in item_positions}
        links = self.links.get_many(folder_id, list(wanted))
        for item_id, link in links.items():
            link.position = wanted[item_id]

        self.db.flush()
        return len(links)

    def remove_items(self, owner_id: str, folder_id: str, item_ids: List[str]) -> int:
        self._owned_folder(owner_id, folder_id)
        removed = self.links.delete_many(folder_id, _dedupe(item_ids))
        self.db.flush()
        logger.info(
            "Items removed from folder",
            extra={"owner_id": owner_id, "folder_id": folder_id, "count": removed},
        )
        return removed

    def list_items(self, folder_id: str) -> List[ItemFolderLink]:
        return self.links.list_for_folder(folder_id)
