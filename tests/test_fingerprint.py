"""Tests for ETag normalization and content-identity comparison."""

from __future__ import annotations

import pytest

from s3upsert.fingerprint import is_identical, md5_hex, normalize_etag
from tests.fixtures.candidates import HELLO_MD5


def test_md5_hex_of_hello() -> None:
    assert md5_hex(b"hello") == HELLO_MD5


def test_normalize_strips_one_char_each_side() -> None:
    assert normalize_etag('"abc123"') == "abc123"
    assert normalize_etag('""abc""') == '"abc"'


@pytest.mark.parametrize(
    ("etag", "expected"),
    [
        (f'"{HELLO_MD5}"', True),
        ('"5d41402abc4b2a76b9719d911017c593"', False),
        (f'"{HELLO_MD5.upper()}"', False),
        (HELLO_MD5, False),
        ("", False),
    ],
    ids=["quoted-match", "one-char-off", "uppercase", "unquoted", "empty"],
)
def test_is_identical(etag: str, expected: bool) -> None:
    assert is_identical(etag, b"hello") is expected


def test_multipart_etag_never_matches() -> None:
    """Multipart ETags carry a part count and force a re-upload."""
    assert not is_identical(f'"{HELLO_MD5}-2"', b"hello")
