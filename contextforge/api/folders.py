"""Folder API: CRUD, tree, templates and item membership.

Single router for all folder operations. Delegates to FolderService (deep
module); every route acts on behalf of the authenticated owner.
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..exceptions import ValidationError
from ..schemas.folder import (
    AddItemsRequest,
    AddItemsResponse,
    FolderCreate,
    FolderDeleteResponse,
    FolderDetailResponse,
    FolderListEntry,
    FolderResponse,
    FolderTreeNode,
    FolderUpdate,
    ItemsUpdateRequest,
    MoveItemsResponse,
    RemoveItemsResponse,
    ReorderItemsResponse,
)
from ..schemas.template import FolderTemplateCreate, FolderTemplateResponse
from ..services.folder_service import FolderService
from ..services.template_service import FolderTemplateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["folders"])


# -- Folders --------------------------------------------------------------

@router.get("", response_model=List[FolderListEntry])
def list_folders(
    parent_id: Optional[str] = Query(None),
    flat: bool = Query(False),
    include_items: bool = Query(False),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Children of ``parent_id`` (root folders when omitted), or every folder with ``flat``.

    ``include_items`` embeds each folder's items.
    """
    return FolderService(db).list_folders(
        auth.user_id, parent_id=parent_id or None, flat=flat, include_items=include_items
    )


@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderService(db).create_folder(auth.user_id, data)


# Declared before /{folder_id} so "tree" and "templates" are not taken for ids.
@router.get("/tree", response_model=List[FolderTreeNode])
def get_tree(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderService(db).get_tree(auth.user_id)


@router.get("/templates", response_model=List[FolderTemplateResponse])
def list_templates(
    category: Optional[str] = Query(None),
    include_public: bool = Query(True),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """The caller's templates plus public ones, most used first."""
    return FolderTemplateService(db).list_templates(
        auth.user_id, include_public=include_public, category=category or None
    )


@router.post("/templates", response_model=FolderTemplateResponse, status_code=201)
def create_template(
    data: FolderTemplateCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderTemplateService(db).create_template(auth.user_id, data)


@router.get("/{folder_id}", response_model=FolderDetailResponse)
def get_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Folder with its parent, direct children and items."""
    return FolderService(db).get_folder_detail(auth.user_id, folder_id)


@router.patch("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Rename, move (``parent_id: null`` moves to the root) or edit attributes."""
    return FolderService(db).update_folder(auth.user_id, folder_id, data)


@router.delete("/{folder_id}", response_model=FolderDeleteResponse)
def delete_folder(
    folder_id: str,
    force: bool = Query(False),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Delete a folder. Non-empty folders need ``force=true``."""
    FolderService(db).delete_folder(auth.user_id, folder_id, force=force)
    return FolderDeleteResponse()


# -- Items ----------------------------------------------------------------

@router.post("/{folder_id}/items", response_model=AddItemsResponse)
def add_items(
    folder_id: str,
    data: AddItemsRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderService(db).add_items(auth.user_id, folder_id, data)


@router.patch("/{folder_id}/items", response_model=Union[MoveItemsResponse, ReorderItemsResponse])
def update_items(
    folder_id: str,
    request: ItemsUpdateRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """``action: move`` sends items to another folder; ``action: reorder`` sets positions."""
    return FolderService(db).update_items(auth.user_id, folder_id, request)


@router.delete("/{folder_id}/items", response_model=RemoveItemsResponse)
def remove_items(
    folder_id: str,
    item_ids: Optional[str] = Query(None, description="Comma-separated item ids"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    ids = [item_id.strip() for item_id in (item_ids or "").split(",") if item_id.strip()]
    if not ids:
        raise ValidationError("No item IDs provided", field="item_ids")
    return FolderService(db).remove_items(auth.user_id, folder_id, ids)
