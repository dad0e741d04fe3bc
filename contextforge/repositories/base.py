"""Base repository with shared owner-scoped get-by-ID patterns.

Every folder and item lookup is scoped to the acting owner. A record owned by
someone else is reported exactly like a missing one. Subclasses set
``model_class`` and ``not_found_error``; the base provides the lookups.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from ..database import Base
from ..exceptions import ForgeException

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for owner-scoped SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., Folder)
        not_found_error: Exception class raised by get_owned
    """

    model_class: Type[ModelT]
    not_found_error: Type[ForgeException]

    def __init__(self, db: Session):
        self.db = db

    def _owned_query(self, owner_id: str) -> Query:
        return self.db.query(self.model_class).filter(self.model_class.owner_id == owner_id)

    def get_owned_optional(self, owner_id: str, entity_id: str, lock: bool = False) -> Optional[ModelT]:
        """Entity by primary key if the owner has it, else None.

        ``lock=True`` takes a row lock for the rest of the transaction.
        """
        query = self._owned_query(owner_id).filter(self.model_class.id == entity_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    def get_owned(self, owner_id: str, entity_id: str, lock: bool = False) -> ModelT:
        """Entity by primary key. Raises not_found_error if missing or foreign."""
        entity = self.get_owned_optional(owner_id, entity_id, lock=lock)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity
