"""Materialized path arithmetic for the folder tree.

Pure functions, no I/O. A folder's path is the chain of ancestor names
joined by ``/`` with a leading separator (``/Work/Prompts``); its level is
its distance from the root (root folders have level 0).
"""

from typing import Optional, Tuple

PATH_SEPARATOR = "/"


def compute_path(parent_path: Optional[str], name: str) -> str:
    """Path of a folder called *name* under a parent at *parent_path*.

    >>> compute_path(None, "Work")
    '/Work'
    >>> compute_path("/Work", "Prompts")
    '/Work/Prompts'
    """
    if parent_path is None:
        return f"{PATH_SEPARATOR}{name}"
    return f"{parent_path}{PATH_SEPARATOR}{name}"


def compute_level(parent_level: Optional[int]) -> int:
    """Depth of a folder whose parent sits at *parent_level* (None for root)."""
    if parent_level is None:
        return 0
    return parent_level + 1


def is_descendant_path(path: str, ancestor_path: str) -> bool:
    """True if *path* lies strictly below *ancestor_path*."""
    return path.startswith(ancestor_path + PATH_SEPARATOR)


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> Tuple[str, int]:
    """Move a descendant path from under *old_prefix* to under *new_prefix*.

    Returns the new path and the depth of the descendant relative to the
    prefix folder (1 for a direct child). Raises ValueError if *path* is not
    a strict descendant of *old_prefix*.

    >>> rebase_path("/A/B/C", "/A", "/Z")
    ('/Z/B/C', 2)
    """
    if not is_descendant_path(path, old_prefix):
        raise ValueError(f"'{path}' is not below '{old_prefix}'")
    suffix = path[len(old_prefix):]
    return new_prefix + suffix, suffix.count(PATH_SEPARATOR)
