"""s3upsert -- conditional uploads to S3-compatible storage."""

from s3upsert.config import S3Config, UploadConfig
from s3upsert.exceptions import (
    CandidateValidationError,
    ConfigError,
    ProbeError,
    S3UpsertError,
    UploadError,
)
from s3upsert.fingerprint import is_identical, md5_hex, normalize_etag
from s3upsert.models import (
    ExistingObjectFingerprint,
    UploadCandidate,
    UploadOutcome,
    UploadStats,
    UploadStatus,
)
from s3upsert.params import build_candidate, resolve
from s3upsert.s3_utils import head_object
from s3upsert.uploader import (
    ConditionalUploader,
    conditional_upload,
    conditional_upload_batch,
    upsert_object,
    upsert_objects,
)
from s3upsert.validation import validate_batch, validate_candidate

__all__ = [
    "CandidateValidationError",
    "ConditionalUploader",
    "ConfigError",
    "ExistingObjectFingerprint",
    "ProbeError",
    "S3Config",
    "S3UpsertError",
    "UploadCandidate",
    "UploadConfig",
    "UploadError",
    "UploadOutcome",
    "UploadStats",
    "UploadStatus",
    "build_candidate",
    "conditional_upload",
    "conditional_upload_batch",
    "head_object",
    "is_identical",
    "md5_hex",
    "normalize_etag",
    "resolve",
    "upsert_object",
    "upsert_objects",
    "validate_batch",
    "validate_candidate",
]
