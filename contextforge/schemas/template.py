"""Folder template schemas."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TEMPLATE_NAME_MAX_LENGTH = 100


class FolderTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=TEMPLATE_NAME_MAX_LENGTH)
    description: Optional[str] = None
    structure: Dict[str, Any]
    rules: Dict[str, Any] = Field(default_factory=dict)
    category: Optional[str] = Field(default=None, max_length=50)
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Template name cannot be empty")
        return v


class FolderTemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    structure: Dict[str, Any] = Field(default_factory=dict)
    rules: Dict[str, Any] = Field(default_factory=dict)
    category: Optional[str] = None
    is_public: bool = False
    usage_count: int = 0
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
