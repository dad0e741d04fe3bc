"""Folder tree and item membership models.

A folder's ``path`` and ``level`` are materialized from its parent chain:
``path`` is ``parent.path + "/" + name`` (``"/" + name`` at the root) and
``level`` is ``parent.level + 1`` (``0`` at the root). Only the folder
services write these columns.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Folder(Base):
    """A node in a user's folder tree (called a collection in the dashboard)."""

    __tablename__ = "folders"
    __table_args__ = (
        UniqueConstraint("owner_id", "parent_id", "name", name="uq_folders_owner_parent_name"),
        UniqueConstraint("owner_id", "path", name="uq_folders_owner_path"),
        Index("ix_folders_owner_id", "owner_id"),
        Index("ix_folders_parent_id", "parent_id"),
        Index("ix_folders_path", "path"),
        Index("ix_folders_level", "level"),
    )

    id = Column(String(50), primary_key=True)  # fld-{16 hex}
    owner_id = Column(String(50), nullable=False)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    # No ON DELETE CASCADE: subtree deletion is done explicitly by FolderStore.
    parent_id = Column(String(50), ForeignKey("folders.id"), nullable=True)
    path = Column(Text, nullable=False)
    level = Column(Integer, nullable=False, default=0)

    # Presentation hints, opaque to the core
    color = Column(String(50), nullable=True)
    icon = Column(String(50), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_template = Column(Boolean, nullable=False, default=False)

    # Consumed by the classification collaborator, stored as-is
    auto_organize = Column(Boolean, nullable=False, default=False)
    organization_rules = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    parent = relationship("Folder", remote_side=[id])

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


class ItemFolderLink(Base):
    """Membership of an item in a folder, ordered by ``position``."""

    __tablename__ = "item_folder_links"
    __table_args__ = (
        Index("ix_item_folder_links_folder_position", "folder_id", "position"),
        Index("ix_item_folder_links_item_id", "item_id"),
    )

    item_id = Column(String(50), ForeignKey("items.id", ondelete="CASCADE"), primary_key=True)
    folder_id = Column(String(50), ForeignKey("folders.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    item = relationship("Item", lazy="joined")
