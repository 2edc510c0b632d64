"""Shared pytest fixtures for s3upsert tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from loguru import logger

from tests.fixtures.fake_s3 import FakeS3

if TYPE_CHECKING:
    from collections.abc import Iterator

_S3_ENV_VARS = (
    "S3UPSERT_CONFIG",
    "S3UPSERT_UPSERT",
    "S3_ENDPOINT_URL",
    "S3_FORCE_PATH_STYLE",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
)


@pytest.fixture
def fake_s3() -> FakeS3:
    """Empty dict-backed S3 client."""
    return FakeS3()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every environment variable the config layer reads."""
    for var in _S3_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def warnings_log() -> Iterator[list[str]]:
    """Collect loguru messages of level WARNING and above."""
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(sink_id)
