"""Content-identity comparison between a local body and a stored ETag.

For objects written with a single ``PutObject`` call, S3-compatible services
report the MD5 hex digest of the body as the ETag, wrapped in double quotes.
MD5 is used here purely as an equality check against that value and is not
a security control.

ETags of multipart uploads look like ``"<hex>-<parts>"`` and never equal a
plain MD5 digest, so such objects are always re-uploaded.
"""

from __future__ import annotations

import hashlib


def md5_hex(body: bytes) -> str:
    """Return the lowercase MD5 hex digest of *body*."""
    return hashlib.md5(body, usedforsecurity=False).hexdigest()


def normalize_etag(etag: str) -> str:
    """Strip one leading and one trailing character (the ETag quotes)."""
    return etag[1:-1]


def is_identical(etag: str, body: bytes) -> bool:
    """True when the raw quoted *etag* matches the MD5 of *body* exactly."""
    return normalize_etag(etag) == md5_hex(body)
