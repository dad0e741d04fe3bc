"""Rewrites descendant paths after a folder is renamed or moved."""

import logging

from sqlalchemy.orm import Session

from ..repositories.folder_repository import FolderRepository
from .folder_paths import rebase_path

logger = logging.getLogger(__name__)


class DescendantPathPropagator:
    """Keeps materialized paths consistent below a changed folder.

    Runs inside the caller's transaction and never commits: if any write
    fails the caller rolls back and the subtree keeps its old paths.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = FolderRepository(db)

    def propagate(self, owner_id: str, old_path: str, new_path: str, new_level: int) -> int:
        """Rebase every strict descendant of *old_path* onto *new_path*.

        *new_level* is the level of the changed folder itself; a descendant
        at depth d below it ends up at ``new_level + d``. Descendants are
        matched by the old path prefix and locked for the update. Returns
        the number of folders rewritten.
        """
        if old_path == new_path:
            return 0

        descendants = self.repo.list_descendants(owner_id, old_path, lock=True)
        for folder in descendants:
            path, depth = rebase_path(folder.path, old_path, new_path)
            self.repo.set_path(folder, path, new_level + depth)

        if descendants:
            self.db.flush()
        logger.debug(
            "Propagated folder path change",
            extra={
                "owner_id": owner_id,
                "old_path": old_path,
                "new_path": new_path,
                "updated": len(descendants),
            },
        )
        return len(descendants)
