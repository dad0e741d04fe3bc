"""Audit logging service: records every committed folder event.

Entries are immutable. Writes happen after the folder change itself has
been committed, so an audit failure never undoes user work.

Usage in service layer:
    audit_service.log(db, user_id="abc", action="moved", resource_type="folder",
                      resource_id="fld-123", details={"old_path": "/A", "new_path": "/B/A"})
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..models.user import AuditLog
from .folder_events import FolderEvent

logger = logging.getLogger(__name__)


def log(
    db: Session,
    user_id: Optional[str],
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    details: Optional[dict] = None,
) -> None:
    """Write an audit log entry. Failures are logged and rolled back, not raised."""
    try:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=json.dumps(details) if details else None,
        )
        db.add(entry)
        db.commit()
    except sqlalchemy.exc.SQLAlchemyError as e:
        logger.warning("Failed to write audit log: %s", e)
        db.rollback()


def record_folder_event(db: Session, event: FolderEvent) -> None:
    details = {}
    if event.old_path is not None:
        details["old_path"] = event.old_path
    if event.new_path is not None:
        details["new_path"] = event.new_path
    log(
        db,
        user_id=event.owner_id,
        action=event.kind,
        resource_type="folder",
        resource_id=event.folder_id,
        details=details,
    )


def get_by_resource(db: Session, resource_type: str, resource_id: str, limit: int = 100) -> List[AuditLog]:
    """Get audit log entries for a specific resource, newest first."""
    return (
        db.query(AuditLog)
        .filter(AuditLog.resource_type == resource_type, AuditLog.resource_id == resource_id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )


def purge_old_entries(db: Session, days: int = 365) -> int:
    """Delete audit log entries older than `days`. Returns count of deleted rows.

    Skipped when days <= 0 (keep forever). Failures are logged, not raised.
    """
    if days <= 0:
        return 0

    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    try:
        count = db.query(AuditLog).filter(AuditLog.created_at < cutoff).delete()
        db.commit()
        return count
    except sqlalchemy.exc.SQLAlchemyError as e:
        logger.warning("Failed to purge audit log: %s", e)
        db.rollback()
        return 0
