"""Folder templates: reusable folder structures shared per user or publicly."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.template import FolderTemplate
from ..repositories.template_repository import TemplateRepository
from ..schemas.template import FolderTemplateCreate, FolderTemplateResponse

logger = logging.getLogger(__name__)

TEMPLATE_ID_LENGTH = 16


def generate_template_id() -> str:
    return f"tpl-{uuid.uuid4().hex[:TEMPLATE_ID_LENGTH]}"


class FolderTemplateService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TemplateRepository(db)

    def list_templates(
        self,
        owner_id: str,
        include_public: bool = True,
        category: Optional[str] = None,
    ) -> List[FolderTemplateResponse]:
        templates = self.repo.list_visible(owner_id, include_public=include_public, category=category)
        return [FolderTemplateResponse.model_validate(t) for t in templates]

    def create_template(self, owner_id: str, data: FolderTemplateCreate) -> FolderTemplateResponse:
        template = FolderTemplate(id=generate_template_id(), created_by=owner_id, **data.model_dump())
        try:
            self.repo.add(template)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(template)

        logger.info(
            "Folder template created",
            extra={"owner_id": owner_id, "template_id": template.id, "is_public": template.is_public},
        )
        return FolderTemplateResponse.model_validate(template)
