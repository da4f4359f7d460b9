# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the console API.
# Every error says what the operator can do next, not only what failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.models.reference import MigrationResult


class ConsoleException(Exception):
    """
    Base exception for the console API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONSOLE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Entity Exceptions
# =============================================================================

class EntityNotFoundError(ConsoleException):
    """Raised when an entity id doesn't exist in its collection."""

    def __init__(self, collection: str, entity_id: str):
        super().__init__(
            message=f"Document not found in {collection}: {entity_id}",
            code="ENTITY_NOT_FOUND",
            status_code=404,
            suggestion="Refresh the list; the document may already have been deleted",
            details={"collection": collection, "entity_id": entity_id}
        )


class InvalidReplacementError(ConsoleException):
    """Raised when the chosen replacement can't receive the dependents."""

    def __init__(self, entity_id: str, replacement_id: str, reason: str):
        super().__init__(
            message=f"Invalid replacement {replacement_id!r} for {entity_id!r}: {reason}",
            code="INVALID_REPLACEMENT",
            status_code=400,
            suggestion="Pick a different, existing entity of the same kind",
            details={"entity_id": entity_id, "replacement_id": replacement_id, "reason": reason}
        )


# =============================================================================
# Reference Integrity Exceptions
# =============================================================================

class QueryFailedError(ConsoleException):
    """
    Raised when dependents could not be determined.

    Deletion is blocked: an unknown dependent count is never treated as zero.
    """

    def __init__(self, collection: str, field_name: str, entity_id: str, error: str):
        super().__init__(
            message=f"Failed to look up {collection} referencing {entity_id} via {field_name}: {error}",
            code="QUERY_FAILED",
            status_code=503,
            suggestion="Nothing was changed. Try again once the store is reachable",
            details={
                "collection": collection,
                "field_name": field_name,
                "entity_id": entity_id,
                "error": error,
            }
        )


class PartialMigrationError(ConsoleException):
    """
    Raised when not every dependent batch committed.

    The entity was NOT deleted. Committed batches stay committed; the
    remaining dependents still reference the original entity.
    """

    def __init__(self, entity_id: str, result: MigrationResult):
        self.result = result
        super().__init__(
            message=f"Migration stopped at batch {result.failed_batch_index}: {result.describe()}",
            code="PARTIAL_MIGRATION",
            status_code=409,
            suggestion="The entity was kept. Re-run the transfer to move the remaining dependents",
            details={"entity_id": entity_id, **result.model_dump(mode="json")}
        )


class DeleteFailedError(ConsoleException):
    """Raised when the store rejects the delete of an entity document."""

    def __init__(self, collection: str, entity_id: str, error: str, migrated: int = 0):
        super().__init__(
            message=f"Failed to delete {entity_id} from {collection}: {error}",
            code="DELETE_FAILED",
            status_code=500,
            suggestion="Dependents are consistent. Retry the delete; no transfer is needed",
            details={
                "collection": collection,
                "entity_id": entity_id,
                "migrated": migrated,
                "error": error,
            }
        )


class StaleDependentSetError(ConsoleException):
    """Raised when dependents appear after the operator's decision."""

    def __init__(self, entity_id: str, dependent_count: int):
        super().__init__(
            message=f"{dependent_count} document(s) still reference {entity_id}",
            code="STALE_DEPENDENT_SET",
            status_code=409,
            suggestion="New references appeared meanwhile. Re-run the delete flow",
            details={"entity_id": entity_id, "dependent_count": dependent_count}
        )


# =============================================================================
# Pagination Exceptions
# =============================================================================

class FetchInProgressError(ConsoleException):
    """Raised when a cursor is asked for a page while one is still loading."""

    def __init__(self, collection: str):
        super().__init__(
            message=f"A page of {collection} is already being fetched",
            code="FETCH_IN_PROGRESS",
            status_code=409,
            suggestion="Wait for the pending page before requesting the next one",
            details={"collection": collection}
        )


class InvalidCursorError(ConsoleException):
    """Raised when a pagination token can't be decoded."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Invalid cursor: {error}",
            code="INVALID_CURSOR",
            status_code=400,
            suggestion="Drop the cursor parameter to start again from the first page",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def console_exception_handler(
    request: Request,
    exc: ConsoleException
) -> JSONResponse:
    """
    Convert ConsoleException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
