"""Format checks shared by candidate validation and parameter resolution."""

from __future__ import annotations

import json
from collections.abc import Mapping

VALID_ACLS = frozenset(
    {
        "private",
        "public-read",
        "public-read-write",
        "authenticated-read",
        "aws-exec-read",
        "bucket-owner-read",
        "bucket-owner-full-control",
    }
)
"""Canned ACLs accepted by ``PutObject``."""

CONTENT_ENCODINGS = frozenset(
    {"gzip", "compress", "deflate", "br", "identity", "zstd"}
)


def is_json_string(value: object) -> bool:
    """Return True when *value* is a string holding valid JSON."""
    if not isinstance(value, str):
        return False
    try:
        json.loads(value)
    except ValueError:
        return False
    return True


def coerce_body(value: object) -> bytes:
    """Convert a textual, bytes-like or readable body to the exact bytes to upload.

    Text is encoded as UTF-8.  An object with a ``read()`` method (an open
    binary file, ``io.BytesIO``) is read to the end once, so the digest and
    the uploaded payload are the same bytes.  Anything else is rejected with
    ``ValueError``.
    """
    read = getattr(value, "read", None)
    if callable(read):
        value = read()
        if not isinstance(value, (str, bytes, bytearray, memoryview)):
            msg = f"body stream returned {type(value).__name__}, expected bytes"
            raise ValueError(msg)
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    msg = (
        "body must be a string, bytes or a readable stream, "
        f"got {type(value).__name__}"
    )
    raise ValueError(msg)


def _metadata_value(name: str, value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    msg = f"metadata value for {name!r} must be a scalar, got {type(value).__name__}"
    raise ValueError(msg)


def parse_metadata(value: object) -> dict[str, str] | None:
    """Normalize user metadata to a flat ``str -> str`` mapping.

    Accepts ``None``, a mapping, or a JSON string holding an object.
    Scalar values are converted to strings; nested values are rejected.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not is_json_string(value):
            msg = "metadata must be a mapping or a JSON object string"
            raise ValueError(msg)
        value = json.loads(value)
    if not isinstance(value, Mapping):
        msg = f"metadata must be a mapping, got {type(value).__name__}"
        raise ValueError(msg)
    result: dict[str, str] = {}
    for name, raw in value.items():
        if not isinstance(name, str) or not name:
            msg = f"metadata keys must be non-empty strings, got {name!r}"
            raise ValueError(msg)
        result[name] = _metadata_value(name, raw)
    return result


def is_valid_acl(acl: str) -> bool:
    """Return True for a canned S3 ACL name."""
    return acl in VALID_ACLS


def is_valid_content_encoding(encoding: str) -> bool:
    """Return True for a known ``Content-Encoding`` (or a comma list of them)."""
    parts = [p.strip().lower() for p in encoding.split(",")]
    return bool(parts) and all(p in CONTENT_ENCODINGS for p in parts)
