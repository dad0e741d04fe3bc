"""Cycle detection for folder re-parenting."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def would_create_cycle(
    candidate_parent_id: str,
    folder_id: str,
    parent_of: Callable[[str], Optional[str]],
    max_steps: int,
) -> bool:
    """True if making *candidate_parent_id* the parent of *folder_id* closes a loop.

    Walks up from the candidate parent through ``parent_of`` until it meets
    *folder_id* (cycle, including self-parenting) or a root (no cycle).

    The walk is bounded by *max_steps* and a visited set. Hitting either
    bound means the stored tree already contains a loop; the move is refused
    rather than risk making it worse.
    """
    current: Optional[str] = candidate_parent_id
    visited: set = set()
    steps = 0

    while current is not None:
        if current == folder_id:
            return True
        if current in visited or steps >= max_steps:
            logger.warning(
                "Folder ancestry walk did not reach a root; refusing move",
                extra={"folder_id": folder_id, "candidate_parent_id": candidate_parent_id, "steps": steps},
            )
            return True
        visited.add(current)
        current = parent_of(current)
        steps += 1

    return False
