"""In-process notifications about folder tree changes.

Collaborators such as the classifier or a cache subscribe here to react
when a folder is created, renamed, moved or deleted. Events are published
only after the change is committed.

Usage:
    from contextforge.services.folder_events import folder_events

    def on_change(event):
        if event.kind == "moved":
            reclassify(event.folder_id)

    folder_events.subscribe(on_change)
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

CREATED = "created"
RENAMED = "renamed"
MOVED = "moved"
DELETED = "deleted"

EVENT_KINDS = (CREATED, RENAMED, MOVED, DELETED)


@dataclass(frozen=True)
class FolderEvent:
    kind: str
    owner_id: str
    folder_id: str
    old_path: Optional[str] = None
    new_path: Optional[str] = None

    def __post_init__(self):
        if self.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown folder event kind: {self.kind}")


Listener = Callable[[FolderEvent], None]


class FolderEventBus:
    """Synchronous fan-out of FolderEvents to subscribed callables."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, event: FolderEvent) -> None:
        """Deliver to every listener. A failing listener does not stop the rest."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Folder event listener failed",
                    extra={"kind": event.kind, "folder_id": event.folder_id},
                )


folder_events = FolderEventBus()
