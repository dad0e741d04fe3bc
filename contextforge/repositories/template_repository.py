"""Repository for folder templates."""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.template import FolderTemplate


class TemplateRepository:
    """Queries over ``folder_templates``. Never commits."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, template: FolderTemplate) -> FolderTemplate:
        self.db.add(template)
        self.db.flush()
        return template

    def list_visible(
        self,
        owner_id: str,
        include_public: bool = True,
        category: Optional[str] = None,
    ) -> List[FolderTemplate]:
        """The owner's templates, plus public ones when *include_public*.

        Most used first, newest first among equal usage.
        """
        query = self.db.query(FolderTemplate)
        if include_public:
            query = query.filter(
                or_(FolderTemplate.created_by == owner_id, FolderTemplate.is_public.is_(True))
            )
        else:
            query = query.filter(FolderTemplate.created_by == owner_id)
        if category:
            query = query.filter(FolderTemplate.category == category)
        return query.order_by(
            FolderTemplate.usage_count.desc(),
            FolderTemplate.created_at.desc(),
            FolderTemplate.id.desc(),
        ).all()
