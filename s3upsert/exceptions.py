"""Custom exception hierarchy for s3upsert.

All library-specific exceptions inherit from ``S3UpsertError`` so consumers
can catch ``except S3UpsertError`` to handle any s3upsert failure.
"""

from __future__ import annotations


class S3UpsertError(Exception):
    """Base exception for all s3upsert errors."""


class CandidateValidationError(S3UpsertError):
    """Raised when an upload candidate or a batch of candidates is malformed.

    Always raised before any request reaches the storage backend.
    """

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize with an optional batch *index* and offending *field*."""
        self.index = index
        self.field = field
        if index is not None:
            message = f"Объект #{index}: {message}"
        super().__init__(message)


class ProbeError(S3UpsertError):
    """Raised when the metadata probe (HEAD) for an object fails."""

    def __init__(self, bucket: str, key: str, cause: BaseException) -> None:
        """Wrap the backend *cause* for ``bucket/key``."""
        self.bucket = bucket
        self.key = key
        self.cause = cause
        super().__init__(f"HEAD s3://{bucket}/{key} не выполнен: {cause}")

    @property
    def not_found(self) -> bool:
        """True when the backend reported the object as absent."""
        return _error_code(self.cause) in {"404", "NoSuchKey", "NotFound"}


class UploadError(S3UpsertError):
    """Raised (or attached to a failed outcome) when a put call fails."""

    def __init__(self, bucket: str, key: str, cause: BaseException) -> None:
        """Wrap the backend *cause* for ``bucket/key``."""
        self.bucket = bucket
        self.key = key
        self.cause = cause
        super().__init__(f"PUT s3://{bucket}/{key} не выполнен: {cause}")


class ConfigError(S3UpsertError):
    """Raised when the configuration file has an invalid structure."""


def _error_code(exc: BaseException) -> str:
    """Return the botocore error code of *exc*, or an empty string."""
    response = getattr(exc, "response", None)
    if not isinstance(response, dict):
        return ""
    return str(response.get("Error", {}).get("Code", ""))
