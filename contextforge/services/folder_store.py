"""Folder records and their parent/child relationships.

FolderStore validates and applies structural changes to single folders:
create, rename/move and delete. It flushes but never commits. The
FolderService decides transaction boundaries and runs descendant path
propagation after a rename or move.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..exceptions import (
    DuplicateFolderNameError,
    FolderCycleError,
    FolderNotEmptyError,
    FolderNotFoundError,
)
from ..models.folder import Folder
from ..repositories.folder_repository import FolderRepository
from ..repositories.link_repository import LinkRepository
from .cycle_guard import would_create_cycle
from .folder_paths import compute_level, compute_path

logger = logging.getLogger(__name__)

# 16 hex chars = 64 bits of randomness per folder id.
FOLDER_ID_LENGTH = 16

# Marker for "parent_id not supplied" in rename_or_move (None means root).
UNSET: Any = object()


def generate_folder_id() -> str:
    return f"fld-{uuid.uuid4().hex[:FOLDER_ID_LENGTH]}"


class FolderStore:
    """Owner-scoped CRUD over the folder tree.

    Public methods:
        create                -- new folder under a parent (or at the root)
        get                   -- lookup by id, optionally row-locked
        rename_or_move        -- change name and/or parent; recomputes path/level
        delete                -- guarded delete with explicit subtree cascade
        list_children         -- direct children ordered by sort_order, name
        find_sibling_by_name  -- name collision lookup
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = FolderRepository(db)
        self.links = LinkRepository(db)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create(
        self,
        owner_id: str,
        name: str,
        parent_id: Optional[str] = None,
        attrs: Optional[Dict[str, Any]] = None,
    ) -> Folder:
        parent = self._resolve_parent(owner_id, parent_id)

        if self.find_sibling_by_name(owner_id, parent_id, name):
            raise DuplicateFolderNameError(name, parent_id)

        folder = Folder(
            id=generate_folder_id(),
            owner_id=owner_id,
            name=name,
            parent_id=parent_id,
            path=compute_path(parent.path if parent else None, name),
            level=compute_level(parent.level if parent else None),
            **(attrs or {}),
        )
        self.repo.add(folder)
        logger.info(
            "Folder created",
            extra={"owner_id": owner_id, "folder_id": folder.id, "path": folder.path},
        )
        return folder

    def get(self, owner_id: str, folder_id: str, lock: bool = False) -> Folder:
        return self.repo.get_owned(owner_id, folder_id, lock=lock)

    def rename_or_move(
        self,
        owner_id: str,
        folder_id: str,
        name: Optional[str] = None,
        parent_id: Optional[str] = UNSET,
    ) -> Tuple[Folder, str]:
        """Apply a new name and/or parent. Returns the folder and its previous path.

        Omitted fields keep their current values; ``parent_id=None`` means
        the root. The caller must propagate the path change to descendants
        when the returned old path differs from ``folder.path``.
        """
        folder = self.get(owner_id, folder_id, lock=True)
        old_path = folder.path

        new_name = name if name is not None else folder.name
        new_parent_id = folder.parent_id if parent_id is UNSET else parent_id

        parent_changed = new_parent_id != folder.parent_id
        if parent_changed and new_parent_id is not None:
            self._check_cycle(owner_id, folder_id, new_parent_id)

        parent = self._resolve_parent(owner_id, new_parent_id)

        if new_name != folder.name or parent_changed:
            if self.find_sibling_by_name(owner_id, new_parent_id, new_name, exclude_id=folder_id):
                raise DuplicateFolderNameError(new_name, new_parent_id)

        folder.name = new_name
        folder.parent_id = new_parent_id
        self.repo.set_path(
            folder,
            compute_path(parent.path if parent else None, new_name),
            compute_level(parent.level if parent else None),
        )
        self.db.flush()
        return folder, old_path

    def delete(self, owner_id: str, folder_id: str, force: bool = False) -> int:
        """Delete a folder. Returns the number of descendant folders removed too.

        Without *force* a folder holding child folders or items is refused.
        With *force* the whole subtree goes: item links of every folder in it,
        then the descendants deepest first, then the folder itself.
        """
        folder = self.get(owner_id, folder_id, lock=True)

        has_children = self.repo.count_children(folder.id) > 0
        has_items = self.links.count_for_folder(folder.id) > 0
        if (has_children or has_items) and not force:
            raise FolderNotEmptyError(folder.id, has_children, has_items)

        levels = self.repo.subtree_levels(
            owner_id, folder.id, max_depth=self.repo.count_for_owner(owner_id)
        )
        descendant_ids = [fid for level in levels for fid in level]

        removed_links = self.links.delete_for_folders([folder.id, *descendant_ids])
        for level in reversed(levels):
            self.repo.delete_ids(level)
        self.repo.delete_ids([folder.id])
        self.db.flush()

        logger.info(
            "Folder deleted",
            extra={
                "owner_id": owner_id,
                "folder_id": folder_id,
                "descendants": len(descendant_ids),
                "links": removed_links,
            },
        )
        return len(descendant_ids)

    def list_children(self, owner_id: str, parent_id: Optional[str]) -> List[Folder]:
        return self.repo.list_children(owner_id, parent_id)

    def find_sibling_by_name(
        self,
        owner_id: str,
        parent_id: Optional[str],
        name: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[Folder]:
        return self.repo.find_sibling_by_name(owner_id, parent_id, name, exclude_id)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve_parent(self, owner_id: str, parent_id: Optional[str]) -> Optional[Folder]:
        if parent_id is None:
            return None
        parent = self.repo.get_owned_optional(owner_id, parent_id)
        if parent is None:
            raise FolderNotFoundError(parent_id, label="Parent folder")
        return parent

    def _check_cycle(self, owner_id: str, folder_id: str, new_parent_id: str) -> None:
        cycle = would_create_cycle(
            new_parent_id,
            folder_id,
            parent_of=lambda fid: self.repo.get_parent_id(owner_id, fid),
            max_steps=self.repo.count_for_owner(owner_id) + 1,
        )
        if cycle:
            raise FolderCycleError(folder_id, new_parent_id)
