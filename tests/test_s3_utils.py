"""Tests for boto3 client helpers."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from s3upsert.config import S3Config
from s3upsert.exceptions import ProbeError
from s3upsert.s3_utils import head_object, make_s3_client, open_s3_client, probe_object
from tests.fixtures.fake_s3 import FakeS3, client_error


def _capture_session(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Patch boto3.Session and return the kwargs passed to ``client()``."""
    captured: dict[str, Any] = {}

    def client(service: str, **kwargs: Any) -> MagicMock:
        captured["service"] = service
        captured.update(kwargs)
        return MagicMock()

    monkeypatch.setattr(
        "s3upsert.s3_utils.boto3.Session",
        lambda: MagicMock(client=client),
    )
    return captured


def test_make_client_passes_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_session(monkeypatch)

    make_s3_client(
        S3Config(
            endpoint_url="http://minio:9000",
            region="us-east-1",
            force_path_style=True,
            access_key_id="id",
            secret_access_key="secret",
        )
    )

    assert captured["service"] == "s3"
    assert captured["endpoint_url"] == "http://minio:9000"
    assert captured["region_name"] == "us-east-1"
    assert captured["aws_access_key_id"] == "id"
    assert captured["aws_secret_access_key"] == "secret"
    assert captured["config"].s3 == {"addressing_style": "path"}


def test_make_client_empty_settings_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture_session(monkeypatch)

    make_s3_client(S3Config())

    assert captured["endpoint_url"] is None
    assert captured["region_name"] is None
    assert captured["aws_access_key_id"] is None
    assert captured["config"] is None


def test_open_client_closes_on_error() -> None:
    fake = FakeS3()

    with pytest.raises(RuntimeError), open_s3_client(S3Config(), lambda _c: fake):
        raise RuntimeError("boom")

    assert fake.closed


def test_head_object_returns_raw_etag(fake_s3: FakeS3) -> None:
    fake_s3.store("b", "k", b"x", etag='"abc"')

    assert head_object(fake_s3, "b", "k").etag == '"abc"'


def test_head_object_not_found(fake_s3: FakeS3) -> None:
    with pytest.raises(ProbeError) as exc_info:
        head_object(fake_s3, "b", "missing")

    assert exc_info.value.not_found


def test_head_object_forbidden_is_not_not_found(fake_s3: FakeS3) -> None:
    fake_s3.fail_head = client_error("403", "HeadObject")

    with pytest.raises(ProbeError) as exc_info:
        head_object(fake_s3, "b", "k")

    assert not exc_info.value.not_found


def test_probe_object_absorbs_errors(fake_s3: FakeS3) -> None:
    fake_s3.fail_head = OSError("timeout")

    assert probe_object(fake_s3, "b", "k") is None


def test_head_object_exported_from_package(fake_s3: FakeS3) -> None:
    import s3upsert

    fake_s3.store("b", "k", b"hello")

    assert s3upsert.head_object is head_object
    assert s3upsert.head_object(fake_s3, "b", "k").etag.startswith('"')
