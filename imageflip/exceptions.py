"""
Image flip service — domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site.  The error_envelope_middleware
catches these and wraps them in the standard error envelope.
"""
from fastapi import HTTPException, status


# ── Task records ─────────────────────────────────────────────────────────────

class TaskNotFound(HTTPException):
    def __init__(self, task_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task {task_id} not found.",
        )


class TaskAmbiguous(HTTPException):
    def __init__(self, task_id: str, count: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Expected one task with id {task_id}, found {count}.",
        )


class TaskStoreError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Task store is unavailable. Please try again.",
        )


# ── Blob storage ─────────────────────────────────────────────────────────────

class SourceImageNotFound(HTTPException):
    def __init__(self, blob_name: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Source image {blob_name} does not exist in storage.",
        )


class BlobStorageError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Blob storage is unavailable. Please try again.",
        )


# ── Credentials ──────────────────────────────────────────────────────────────

class StorageAccessDenied(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Storage credentials were rejected.",
        )


class StorageCredentialsMissing(HTTPException):
    def __init__(self, setting: str) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{setting} is not configured.",
        )


# ── Image ────────────────────────────────────────────────────────────────────

class ImageDecodeError(HTTPException):
    def __init__(self, blob_name: str) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{blob_name} is not a readable image.",
        )
