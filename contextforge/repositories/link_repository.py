"""Repository for item-folder membership links."""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..models.folder import ItemFolderLink


class LinkRepository:
    """CRUD for ``item_folder_links``. Never commits."""

    def __init__(self, db: Session):
        self.db = db

    def _in_folder(self, folder_id: str):
        return self.db.query(ItemFolderLink).filter(ItemFolderLink.folder_id == folder_id)

    def max_position(self, folder_id: str) -> Optional[int]:
        return (
            self.db.query(func.max(ItemFolderLink.position))
            .filter(ItemFolderLink.folder_id == folder_id)
            .scalar()
        )

    def get(self, folder_id: str, item_id: str) -> Optional[ItemFolderLink]:
        return self._in_folder(folder_id).filter(ItemFolderLink.item_id == item_id).first()

    def get_many(self, folder_id: str, item_ids: List[str]) -> Dict[str, ItemFolderLink]:
        if not item_ids:
            return {}
        links = self._in_folder(folder_id).filter(ItemFolderLink.item_id.in_(item_ids)).all()
        return {link.item_id: link for link in links}

    def create(self, item_id: str, folder_id: str, position: int) -> ItemFolderLink:
        link = ItemFolderLink(item_id=item_id, folder_id=folder_id, position=position)
        self.db.add(link)
        return link

    def delete(self, link: ItemFolderLink) -> None:
        self.db.delete(link)

    def delete_many(self, folder_id: str, item_ids: List[str]) -> int:
        if not item_ids:
            return 0
        return (
            self._in_folder(folder_id)
            .filter(ItemFolderLink.item_id.in_(item_ids))
            .delete(synchronize_session=False)
        )

    def delete_for_folders(self, folder_ids: List[str]) -> int:
        if not folder_ids:
            return 0
        return (
            self.db.query(ItemFolderLink)
            .filter(ItemFolderLink.folder_id.in_(folder_ids))
            .delete(synchronize_session=False)
        )

    def count_for_folder(self, folder_id: str) -> int:
        return (
            self.db.query(func.count(ItemFolderLink.item_id))
            .filter(ItemFolderLink.folder_id == folder_id)
            .scalar()
            or 0
        )

    def counts_for_folders(self, folder_ids: List[str]) -> Dict[str, int]:
        if not folder_ids:
            return {}
        rows = (
            self.db.query(ItemFolderLink.folder_id, func.count(ItemFolderLink.item_id))
            .filter(ItemFolderLink.folder_id.in_(folder_ids))
            .group_by(ItemFolderLink.folder_id)
            .all()
        )
        return {folder_id: count for folder_id, count in rows}

    def list_for_folder(self, folder_id: str) -> List[ItemFolderLink]:
        """Links ordered by position, newest first among equal positions."""
        return (
            self._in_folder(folder_id)
            .options(joinedload(ItemFolderLink.item))
            .order_by(ItemFolderLink.position.asc(), ItemFolderLink.created_at.desc())
            .all()
        )

    def list_for_folders(self, folder_ids: List[str]) -> Dict[str, List[ItemFolderLink]]:
        """Links of several folders in one query, grouped by folder."""
        if not folder_ids:
            return {}
        links = (
            self.db.query(ItemFolderLink)
            .options(joinedload(ItemFolderLink.item))
            .filter(ItemFolderLink.folder_id.in_(folder_ids))
            .order_by(ItemFolderLink.position.asc(), ItemFolderLink.created_at.desc())
            .all()
        )
        grouped: Dict[str, List[ItemFolderLink]] = {}
        for link in links:
            grouped.setdefault(link.folder_id, []).append(link)
        return grouped
