"""Builders for upload candidates used across tests."""

from __future__ import annotations

from s3upsert.models import UploadCandidate

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"


def make_candidate(**overrides: object) -> UploadCandidate:
    """Create an UploadCandidate with sensible defaults."""
    data: dict[str, object] = {
        "bucket": "b",
        "key": "k",
        "body": "hello",
        "contentType": "text/plain",
    }
    data.update(overrides)
    return UploadCandidate.model_validate(data)


def raw_objects(n: int, bucket: str = "b") -> list[dict[str, object]]:
    """Build *n* raw candidate dicts with distinct keys and bodies."""
    return [
        {
            "bucket": bucket,
            "key": f"obj-{i}.txt",
            "body": f"body {i}",
            "contentType": "text/plain",
        }
        for i in range(n)
    ]
