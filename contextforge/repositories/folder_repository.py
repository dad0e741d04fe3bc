"""Repository for folder tree queries.

Pure data access: no validation, no commits. Callers in the service layer
decide transaction boundaries.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func

from ..exceptions import FolderNotFoundError
from ..models.folder import Folder
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Data access layer for the ``folders`` table."""

    model_class = Folder
    not_found_error = FolderNotFoundError

    def add(self, folder: Folder) -> Folder:
        self.db.add(folder)
        self.db.flush()
        return folder

    def get_parent_id(self, owner_id: str, folder_id: str) -> Optional[str]:
        """Parent id of a folder, or None for a root or an unknown folder."""
        row = (
            self.db.query(Folder.parent_id)
            .filter(Folder.owner_id == owner_id, Folder.id == folder_id)
            .first()
        )
        return row[0] if row else None

    def count_for_owner(self, owner_id: str) -> int:
        return self.db.query(func.count(Folder.id)).filter(Folder.owner_id == owner_id).scalar() or 0

    def list_all(self, owner_id: str) -> List[Folder]:
        return (
            self._owned_query(owner_id)
            .order_by(Folder.level, Folder.sort_order, Folder.name)
            .all()
        )

    def list_children(self, owner_id: str, parent_id: Optional[str]) -> List[Folder]:
        query = self._owned_query(owner_id)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        return query.order_by(Folder.sort_order, Folder.name).all()

    def find_sibling_by_name(
        self,
        owner_id: str,
        parent_id: Optional[str],
        name: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[Folder]:
        query = self._owned_query(owner_id).filter(Folder.name == name)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        if exclude_id is not None:
            query = query.filter(Folder.id != exclude_id)
        return query.first()

    def list_descendants(self, owner_id: str, path: str, lock: bool = False) -> List[Folder]:
        """Strict descendants of the folder at *path*, shallowest first.

        Matches on the materialized path prefix ``path + "/"``; LIKE
        wildcards inside folder names are escaped.
        """
        query = (
            self._owned_query(owner_id)
            .filter(Folder.path.startswith(f"{path}/", autoescape=True))
            .order_by(Folder.level, Folder.path)
        )
        if lock:
            query = query.with_for_update()
        return query.all()

    def count_children(self, folder_id: str) -> int:
        return self.db.query(func.count(Folder.id)).filter(Folder.parent_id == folder_id).scalar() or 0

    def child_counts(self, folder_ids: List[str]) -> Dict[str, int]:
        """Number of direct children per folder id (absent ids have none)."""
        if not folder_ids:
            return {}
        rows = (
            self.db.query(Folder.parent_id, func.count(Folder.id))
            .filter(Folder.parent_id.in_(folder_ids))
            .group_by(Folder.parent_id)
            .all()
        )
        return {parent_id: count for parent_id, count in rows}

    def subtree_levels(self, owner_id: str, folder_id: str, max_depth: int) -> List[List[str]]:
        """Descendant ids grouped by distance from *folder_id*.

        Walks ``parent_id`` links rather than paths so a stale path can never
        hide a descendant from deletion. Index 0 holds the direct children.
        """
        levels: List[List[str]] = []
        frontier = [folder_id]
        seen = {folder_id}
        while frontier and len(levels) < max_depth:
            rows = (
                self.db.query(Folder.id)
                .filter(Folder.owner_id == owner_id, Folder.parent_id.in_(frontier))
                .all()
            )
            children = [row[0] for row in rows if row[0] not in seen]
            if not children:
                break
            seen.update(children)
            levels.append(children)
            frontier = children
        return levels

    def delete_ids(self, folder_ids: List[str]) -> int:
        if not folder_ids:
            return 0
        return (
            self.db.query(Folder)
            .filter(Folder.id.in_(folder_ids))
            .delete(synchronize_session=False)
        )

    def set_path(self, folder: Folder, path: str, level: int) -> Tuple[str, int]:
        """Write materialized path/level on a loaded folder. Returns the old pair."""
        old = (folder.path, folder.level)
        folder.path = path
        folder.level = level
        return old
