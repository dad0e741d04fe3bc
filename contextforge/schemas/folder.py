"""Folder, tree and item-membership schemas."""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

FOLDER_NAME_MAX_LENGTH = 100
PRESENTATION_HINT_MAX_LENGTH = 50  # color and icon columns


def _validate_folder_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Folder name cannot be empty")
    if len(v) > FOLDER_NAME_MAX_LENGTH:
        raise ValueError(f"Folder name cannot exceed {FOLDER_NAME_MAX_LENGTH} characters")
    if "/" in v:
        raise ValueError("Folder name cannot contain '/'")
    return v


def _empty_to_none(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        return None
    return v


# --- Folder schemas ---

class FolderCreate(BaseModel):
    """Create a folder under ``parent_id`` (root level when omitted)."""
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=PRESENTATION_HINT_MAX_LENGTH)
    icon: Optional[str] = Field(default=None, max_length=PRESENTATION_HINT_MAX_LENGTH)
    sort_order: int = 0
    is_template: bool = False
    auto_organize: bool = False
    organization_rules: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_folder_name(v)

    @field_validator("parent_id")
    @classmethod
    def normalize_parent(cls, v: Optional[str]) -> Optional[str]:
        return _empty_to_none(v)


class FolderUpdate(BaseModel):
    """Partial update. Only fields present in the request are applied.

    ``parent_id`` explicitly set to ``null`` moves the folder to the root;
    leaving it out keeps the current parent.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=PRESENTATION_HINT_MAX_LENGTH)
    icon: Optional[str] = Field(default=None, max_length=PRESENTATION_HINT_MAX_LENGTH)
    sort_order: Optional[int] = None
    auto_organize: Optional[bool] = None
    organization_rules: Optional[Dict[str, Any]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _validate_folder_name(v)

    @field_validator("parent_id")
    @classmethod
    def normalize_parent(cls, v: Optional[str]) -> Optional[str]:
        return _empty_to_none(v)

    @property
    def moves(self) -> bool:
        return "parent_id" in self.model_fields_set


class FolderResponse(BaseModel):
    """Folder with its child and item counts."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    path: str
    level: int
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0
    is_template: bool = False
    auto_organize: bool = False
    organization_rules: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    child_count: int = 0
    item_count: int = 0


class ItemSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    sub_type: Optional[str] = None
    format: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FolderItemResponse(BaseModel):
    """An item as it appears inside a folder."""
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    folder_id: str
    position: int
    created_at: Optional[datetime] = None
    item: ItemSummary


class FolderListEntry(FolderResponse):
    """A folder in a listing. ``items`` is only filled when requested."""
    items: Optional[List[FolderItemResponse]] = None


class FolderDetailResponse(FolderResponse):
    """A folder with its parent, one level of children and its items."""
    parent: Optional[FolderResponse] = None
    children: List[FolderResponse] = Field(default_factory=list)
    items: List[FolderItemResponse] = Field(default_factory=list)


class FolderTreeNode(BaseModel):
    id: str
    name: str
    path: str
    level: int
    icon: Optional[str] = None
    color: Optional[str] = None
    item_count: int = 0
    children: List["FolderTreeNode"] = Field(default_factory=list)


class FolderDeleteResponse(BaseModel):
    success: bool = True


# --- Item membership schemas ---

class AddItemsRequest(BaseModel):
    """Add items to a folder, starting at ``position`` or after the last item."""
    item_ids: List[str] = Field(min_length=1)
    position: Optional[int] = None


class AddItemsResponse(BaseModel):
    success: bool = True
    added_items: int


class MoveItemsRequest(BaseModel):
    action: Literal["move"]
    item_ids: List[str] = Field(min_length=1)
    target_folder_id: str
    position: Optional[int] = None


class ItemPosition(BaseModel):
    item_id: str
    position: int


class ReorderItemsRequest(BaseModel):
    action: Literal["reorder"]
    item_positions: List[ItemPosition]


ItemsUpdateRequest = Annotated[
    Union[MoveItemsRequest, ReorderItemsRequest],
    Field(discriminator="action"),
]


class MoveItemsResponse(BaseModel):
    success: bool = True
    moved_items: int


class ReorderItemsResponse(BaseModel):
    success: bool = True
    reordered_items: int


class RemoveItemsResponse(BaseModel):
    success: bool = True
    removed_items: int
