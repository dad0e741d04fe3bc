"""Reusable folder structure templates.

A template stores a folder ``structure`` and organization ``rules`` as
opaque JSON. It is private to its creator unless ``is_public`` is set.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from ..database import Base


class FolderTemplate(Base):
    __tablename__ = "folder_templates"
    __table_args__ = (
        Index("ix_folder_templates_category", "category"),
        Index("ix_folder_templates_is_public", "is_public"),
        Index("ix_folder_templates_created_by", "created_by"),
    )

    id = Column(String(50), primary_key=True)  # tpl-{16 hex}
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    structure = Column(JSON, nullable=False, default=dict)
    rules = Column(JSON, nullable=False, default=dict)

    category = Column(String(50), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    usage_count = Column(Integer, nullable=False, default=0)

    created_by = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
