"""Type definitions for S3 client interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class S3Client(Protocol):
    """Structural protocol for a boto3 S3 client (subset used by s3upsert)."""

    def head_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        """Fetch object metadata without the body."""
        ...

    def put_object(self, **kwargs: Any) -> dict[str, Any]:
        """Put an object to S3."""
        ...

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        ...
