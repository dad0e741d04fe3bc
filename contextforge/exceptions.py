"""Custom exception hierarchy for ContextForge."""

from enum import Enum
from typing import Optional, Dict, Any, List


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Folder errors
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    DUPLICATE_FOLDER_NAME = "DUPLICATE_FOLDER_NAME"
    FOLDER_CYCLE = "FOLDER_CYCLE"
    FOLDER_NOT_EMPTY = "FOLDER_NOT_EMPTY"

    # Item errors
    ITEMS_NOT_FOUND = "ITEMS_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ForgeException(Exception):
    """
    Base exception for all ContextForge errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Body of the JSON error response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class FolderNotFoundError(ForgeException):
    """Folder is missing or owned by someone else.

    The two cases are deliberately indistinguishable to the caller.
    """

    def __init__(self, folder_id: str, label: str = "Folder"):
        super().__init__(
            f"{label} not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class ItemsNotFoundError(ForgeException):
    """One or more items in a batch are missing or not owned by the caller."""

    def __init__(self, missing_item_ids: List[str]):
        super().__init__(
            "Some items not found or not accessible",
            ErrorCode.ITEMS_NOT_FOUND,
            status_code=404,
            details={"missing_item_ids": missing_item_ids}
        )


class DuplicateFolderNameError(ForgeException):
    """A sibling with the same name already exists under the target parent."""

    def __init__(self, name: str, parent_id: Optional[str]):
        super().__init__(
            "A folder with this name already exists in this location",
            ErrorCode.DUPLICATE_FOLDER_NAME,
            status_code=409,
            details={"name": name, "parent_id": parent_id}
        )


class FolderCycleError(ForgeException):
    """Re-parenting would make the folder its own ancestor."""

    def __init__(self, folder_id: str, parent_id: str):
        super().__init__(
            "Cannot move folder: would create a cycle",
            ErrorCode.FOLDER_CYCLE,
            status_code=400,
            details={"folder_id": folder_id, "parent_id": parent_id}
        )


class FolderNotEmptyError(ForgeException):
    """Delete of a folder with children or items without force."""

    def __init__(self, folder_id: str, has_children: bool, has_items: bool):
        super().__init__(
            "Folder is not empty. Use force=true to delete non-empty folders.",
            ErrorCode.FOLDER_NOT_EMPTY,
            status_code=409,
            details={
                "folder_id": folder_id,
                "has_children": has_children,
                "has_items": has_items,
            }
        )


class ValidationError(ForgeException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[list] = None):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class AuthenticationError(ForgeException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )


class DatabaseError(ForgeException):
    """Database operation failed.

    The driver's message is kept on the exception for logging but never
    put into the response body.
    """

    def __init__(self, message: str = "Database operation failed", original_error: Optional[Exception] = None):
        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
        )
        self.original_error = original_error
