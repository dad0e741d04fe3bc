"""Read-only access to externally owned context items."""

from typing import List, Set

from sqlalchemy.orm import Session

from ..models.item import Item


class ItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_owned_ids(self, owner_id: str, item_ids: List[str]) -> Set[str]:
        """Subset of *item_ids* that exist and belong to *owner_id*."""
        if not item_ids:
            return set()
        rows = (
            self.db.query(Item.id)
            .filter(Item.owner_id == owner_id, Item.id.in_(item_ids))
            .all()
        )
        return {row[0] for row in rows}
