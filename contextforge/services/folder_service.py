"""Deep module for all folder operations: CRUD, move, delete, items and tree.

Callers interact with high-level operations and never manage paths,
cycle checks, descendant propagation or transactions themselves. Each
mutating method is one unit of work: everything it writes commits
together or not at all, and folder events go out only after the commit.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import DuplicateFolderNameError, FolderNotFoundError
from ..models.folder import Folder
from ..repositories.link_repository import LinkRepository
from ..schemas.folder import (
    AddItemsRequest,
    AddItemsResponse,
    FolderCreate,
    FolderDetailResponse,
    FolderItemResponse,
    FolderListEntry,
    FolderResponse,
    FolderTreeNode,
    FolderUpdate,
    MoveItemsRequest,
    MoveItemsResponse,
    RemoveItemsResponse,
    ReorderItemsRequest,
    ReorderItemsResponse,
)
from . import audit_service
from .folder_events import CREATED, DELETED, MOVED, RENAMED, FolderEvent, FolderEventBus, folder_events
from .folder_store import UNSET, FolderStore
from .item_links import ItemFolderLinkManager
from .path_propagator import DescendantPathPropagator

logger = logging.getLogger(__name__)

# Attributes copied verbatim from FolderUpdate. The nullable ones may be
# cleared with an explicit null; the others ignore it.
_PLAIN_ATTRIBUTES = ("description", "color", "icon", "sort_order", "auto_organize", "organization_rules")
_NON_NULLABLE = {"sort_order", "auto_organize", "organization_rules"}

# PostgreSQL names the violated constraint; SQLite lists the table's columns.
_FOLDER_UNIQUE_MARKERS = (
    "uq_folders_owner_parent_name",
    "uq_folders_owner_path",
    "UNIQUE constraint failed: folders.",
)


def _is_folder_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _FOLDER_UNIQUE_MARKERS)


class FolderService:
    """All folder and item-membership operations behind a simple interface.

    Public methods:
        create_folder      -- new folder under a parent or at the root
        get_folder_detail  -- folder, parent, children and items
        list_folders       -- children of a parent, or every folder when flat
        get_tree           -- nested navigation tree
        update_folder      -- rename / move / attributes, with path propagation
        delete_folder      -- guarded delete, recursive with force
        add_items          -- link items into a folder
        remove_items       -- unlink items from a folder
        update_items       -- move items to another folder or reorder them
    """

    def __init__(self, db: Session, events: FolderEventBus = folder_events):
        self.db = db
        self.events = events
        self.store = FolderStore(db)
        self.propagator = DescendantPathPropagator(db)
        self.item_links = ItemFolderLinkManager(db)
        self.folder_repo = self.store.repo
        self.link_repo = LinkRepository(db)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_folder(self, owner_id: str, data: FolderCreate) -> FolderResponse:
        attrs = data.model_dump(exclude={"name", "parent_id"})
        with self._unit_of_work({"name": data.name, "parent_id": data.parent_id}):
            folder = self.store.create(owner_id, data.name, data.parent_id, attrs)

        response = self._to_response(folder)
        self._publish([FolderEvent(CREATED, owner_id, response.id, new_path=response.path)])
        return response

    def get_folder_detail(self, owner_id: str, folder_id: str) -> FolderDetailResponse:
        folder = self.store.get(owner_id, folder_id)
        parent = self.folder_repo.get_owned_optional(owner_id, folder.parent_id) if folder.parent_id else None
        children = self.store.list_children(owner_id, folder.id)

        related = [folder, *children] + ([parent] if parent else [])
        child_counts, item_counts = self._counts(related)

        def build(f: Folder) -> FolderResponse:
            return self._to_response(f, child_counts.get(f.id, 0), item_counts.get(f.id, 0))

        items = [FolderItemResponse.model_validate(link) for link in self.item_links.list_items(folder.id)]
        return FolderDetailResponse(
            **build(folder).model_dump(),
            parent=build(parent) if parent else None,
            children=[build(child) for child in children],
            items=items,
        )

    def list_folders(
        self,
        owner_id: str,
        parent_id: Optional[str] = None,
        flat: bool = False,
        include_items: bool = False,
    ) -> List[FolderListEntry]:
        """Direct children of *parent_id* (roots when None), or all folders when *flat*.

        With *include_items* every entry carries its items in position order.
        """
        if flat:
            folders = self.folder_repo.list_all(owner_id)
        else:
            if parent_id is not None:
                self.store.get(owner_id, parent_id)
            folders = self.store.list_children(owner_id, parent_id)

        child_counts, item_counts = self._counts(folders)
        links = self.link_repo.list_for_folders([f.id for f in folders]) if include_items else {}

        entries = []
        for f in folders:
            entry = FolderListEntry(
                **self._to_response(f, child_counts.get(f.id, 0), item_counts.get(f.id, 0)).model_dump()
            )
            if include_items:
                entry.items = [FolderItemResponse.model_validate(link) for link in links.get(f.id, [])]
            entries.append(entry)
        return entries

    def get_tree(self, owner_id: str) -> List[FolderTreeNode]:
        """Build the owner's whole folder tree in memory from one flat query."""
        folders = self.folder_repo.list_all(owner_id)
        item_counts = self.link_repo.counts_for_folders([f.id for f in folders])

        nodes: Dict[str, FolderTreeNode] = {}
        roots: List[FolderTreeNode] = []
        # list_all orders by level, so a parent's node exists before its children.
        for folder in folders:
            node = FolderTreeNode(
                id=folder.id,
                name=folder.name,
                path=folder.path,
                level=folder.level,
                icon=folder.icon,
                color=folder.color,
                item_count=item_counts.get(folder.id, 0),
            )
            nodes[folder.id] = node
            parent_node = nodes.get(folder.parent_id) if folder.parent_id else None
            if parent_node is not None:
                parent_node.children.append(node)
            else:
                roots.append(node)
        return roots

    def update_folder(self, owner_id: str, folder_id: str, data: FolderUpdate) -> FolderResponse:
        """Apply a partial update.

        A rename or move recomputes the folder's path and level and rewrites
        every descendant path in the same transaction.
        """
        pending: List[FolderEvent] = []
        conflict: Dict[str, Optional[str]] = {}
        with self._unit_of_work(conflict):
            folder = self.store.get(owner_id, folder_id, lock=True)
            old_name, old_parent_id = folder.name, folder.parent_id
            conflict["name"] = data.name if data.name is not None else old_name
            conflict["parent_id"] = data.parent_id if data.moves else old_parent_id

            if data.name is not None or data.moves:
                folder, old_path = self.store.rename_or_move(
                    owner_id,
                    folder_id,
                    name=data.name,
                    parent_id=data.parent_id if data.moves else UNSET,
                )
                if folder.path != old_path:
                    updated = self.propagator.propagate(owner_id, old_path, folder.path, folder.level)
                    logger.info(
                        "Folder path changed",
                        extra={
                            "owner_id": owner_id,
                            "folder_id": folder_id,
                            "old_path": old_path,
                            "path": folder.path,
                            "descendants": updated,
                        },
                    )
                    if folder.name != old_name:
                        pending.append(FolderEvent(RENAMED, owner_id, folder_id, old_path, folder.path))
                    if folder.parent_id != old_parent_id:
                        pending.append(FolderEvent(MOVED, owner_id, folder_id, old_path, folder.path))

            changes = data.model_dump(include=set(_PLAIN_ATTRIBUTES), exclude_unset=True)
            for field, value in changes.items():
                if value is None and field in _NON_NULLABLE:
                    continue
                setattr(folder, field, value)
            self.db.flush()

        response = self._with_counts(folder)
        self._publish(pending)
        return response

    def delete_folder(self, owner_id: str, folder_id: str, force: bool = False) -> None:
        with self._unit_of_work():
            path = self.store.get(owner_id, folder_id).path
            self.store.delete(owner_id, folder_id, force=force)

        self._publish([FolderEvent(DELETED, owner_id, folder_id, old_path=path)])

    def add_items(self, owner_id: str, folder_id: str, data: AddItemsRequest) -> AddItemsResponse:
        with self._unit_of_work():
            added = self.item_links.add_items(owner_id, folder_id, data.item_ids, data.position)
        return AddItemsResponse(added_items=added)

    def remove_items(self, owner_id: str, folder_id: str, item_ids: List[str]) -> RemoveItemsResponse:
        with self._unit_of_work():
            removed = self.item_links.remove_items(owner_id, folder_id, item_ids)
        return RemoveItemsResponse(removed_items=removed)

    def update_items(
        self,
        owner_id: str,
        folder_id: str,
        request: Union[MoveItemsRequest, ReorderItemsRequest],
    ) -> Union[MoveItemsResponse, ReorderItemsResponse]:
        with self._unit_of_work():
            match request:
                case MoveItemsRequest(item_ids=item_ids, target_folder_id=target, position=position):
                    moved = self.item_links.move_items(owner_id, folder_id, target, item_ids, position)
                    result = MoveItemsResponse(moved_items=moved)
                case ReorderItemsRequest(item_positions=positions):
                    reordered = self.item_links.reorder_items(
                        owner_id, folder_id, [p.model_dump() for p in positions]
                    )
                    result = ReorderItemsResponse(reordered_items=reordered)
                case _:
                    raise TypeError(f"Unsupported items request: {type(request).__name__}")
        return result

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _unit_of_work(self, conflict: Optional[Dict[str, Optional[str]]] = None) -> Iterator[None]:
        """Commit on success, roll back on any error.

        *conflict* holds the ``name`` and ``parent_id`` being written. When it
        is given, a violation of the folder unique constraints (a concurrent
        request took the same sibling name or path) becomes a
        DuplicateFolderNameError, and any other integrity error on a parent
        that no longer exists becomes a FolderNotFoundError. Anything else
        propagates. The body may fill it in once the folder is loaded.
        """
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not conflict:
                raise
            name, parent_id = conflict.get("name"), conflict.get("parent_id")
            if _is_folder_unique_violation(e):
                logger.warning(
                    "Folder unique constraint violated",
                    extra={"folder_name": name, "parent_id": parent_id},
                )
                raise DuplicateFolderNameError(name, parent_id) from e
            # The parent may have been deleted between the check and the write.
            if parent_id is not None and self.db.get(Folder, parent_id) is None:
                logger.warning("Parent folder vanished during write", extra={"parent_id": parent_id})
                raise FolderNotFoundError(parent_id, label="Parent folder") from e
            raise
        except Exception:
            self.db.rollback()
            raise

    def _publish(self, events: List[FolderEvent]) -> None:
        for event in events:
            audit_service.record_folder_event(self.db, event)
            self.events.publish(event)

    def _counts(self, folders: List[Folder]):
        ids = [f.id for f in folders]
        return self.folder_repo.child_counts(ids), self.link_repo.counts_for_folders(ids)

    def _with_counts(self, folder: Folder) -> FolderResponse:
        return self._to_response(
            folder,
            self.folder_repo.count_children(folder.id),
            self.link_repo.count_for_folder(folder.id),
        )

    @staticmethod
    def _to_response(folder: Folder, child_count: int = 0, item_count: int = 0) -> FolderResponse:
        return FolderResponse.model_validate(folder).model_copy(
            update={"child_count": child_count, "item_count": item_count}
        )
