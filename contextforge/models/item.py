"""Context item model.

Items (prompts, agents, rules, templates) are written by the item
subsystem; the folder core only reads ``id`` and ``owner_id`` to validate
membership requests and ``name``/``type``/``format`` to list folder contents.
"""

from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.sql import func

from ..database import Base


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        Index("ix_items_owner_id", "owner_id"),
    )

    id = Column(String(50), primary_key=True)
    owner_id = Column(String(50), nullable=False)

    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)  # prompt, agent, rule, template, ...
    sub_type = Column(String(50), nullable=True)
    format = Column(String(50), nullable=False, default="markdown")
    content = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
