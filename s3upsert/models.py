"""Pydantic models for upload candidates and their outcomes."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from s3upsert.formats import (
    coerce_body,
    is_valid_acl,
    is_valid_content_encoding,
    parse_metadata,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

# ------------------------------------------------------------------
# Input
# ------------------------------------------------------------------


class UploadCandidate(BaseModel):
    """One object proposed for upload: target location plus payload.

    Field names follow Python style; the camelCase spellings used by
    message producers (``contentType``, ``contentEncoding``) are accepted
    as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bucket: str
    key: str
    body: bytes
    content_type: str = Field(alias="contentType")
    metadata: dict[str, str] | None = None
    acl: str | None = None
    content_encoding: str | None = Field(default=None, alias="contentEncoding")

    @field_validator("bucket", "key", "content_type")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            msg = "must be a non-empty string"
            raise ValueError(msg)
        return v

    @field_validator("body", mode="before")
    @classmethod
    def _coerce_body(cls, v: object) -> bytes:
        body = coerce_body(v)
        if not body:
            msg = "body must not be empty"
            raise ValueError(msg)
        return body

    @field_validator("metadata", mode="before")
    @classmethod
    def _parse_metadata(cls, v: object) -> dict[str, str] | None:
        return parse_metadata(v)

    @field_validator("acl")
    @classmethod
    def _check_acl(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_acl(v):
            msg = f"invalid ACL permissions value {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("content_encoding")
    @classmethod
    def _check_encoding(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_content_encoding(v):
            msg = f"invalid content encoding {v!r}"
            raise ValueError(msg)
        return v

    @property
    def location(self) -> str:
        """``s3://bucket/key`` form for log messages."""
        return f"s3://{self.bucket}/{self.key}"


# ------------------------------------------------------------------
# Probe result
# ------------------------------------------------------------------


class ExistingObjectFingerprint(BaseModel):
    """Content fingerprint of an object already stored in the bucket.

    ``etag`` is kept exactly as the service reports it, surrounding quote
    characters included.
    """

    model_config = ConfigDict(frozen=True)

    etag: str


# ------------------------------------------------------------------
# Outcomes
# ------------------------------------------------------------------


class UploadStatus(str, Enum):
    """Per-candidate result of a conditional upload."""

    UPLOADED = "uploaded"
    SKIPPED_IDENTICAL = "skipped_identical"
    FAILED = "failed"


class UploadOutcome(BaseModel):
    """Outcome for one candidate.

    ``result`` is set only for uploaded objects, ``error`` only for failed ones.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    status: UploadStatus
    result: dict[str, Any] | None = None
    error: BaseException | None = None

    @classmethod
    def uploaded(cls, key: str, result: dict[str, Any]) -> UploadOutcome:
        return cls(key=key, status=UploadStatus.UPLOADED, result=result)

    @classmethod
    def skipped(cls, key: str) -> UploadOutcome:
        return cls(key=key, status=UploadStatus.SKIPPED_IDENTICAL)

    @classmethod
    def failed(cls, key: str, error: BaseException) -> UploadOutcome:
        return cls(key=key, status=UploadStatus.FAILED, error=error)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (the error is rendered as text)."""
        data: dict[str, Any] = {"key": self.key, "status": self.status.value}
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = str(self.error)
        return data


class UploadStats(BaseModel):
    """Result counters for an upload run."""

    uploaded: int = 0
    skipped_identical: int = 0
    failed: int = 0
    total: int = 0

    @classmethod
    def from_outcomes(
        cls,
        outcomes: Iterable[UploadOutcome] | None,
    ) -> UploadStats:
        """Count *outcomes* by status."""
        stats = cls()
        for outcome in outcomes or ():
            stats.total += 1
            if outcome.status is UploadStatus.UPLOADED:
                stats.uploaded += 1
            elif outcome.status is UploadStatus.SKIPPED_IDENTICAL:
                stats.skipped_identical += 1
            else:
                stats.failed += 1
        return stats
