"""Thin helpers around a boto3 S3 client: creation, probing and writing."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from s3upsert.exceptions import ProbeError
from s3upsert.models import ExistingObjectFingerprint

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from s3upsert.config import S3Config
    from s3upsert.models import UploadCandidate
    from s3upsert.s3_types import S3Client

STORAGE_ERRORS = (ClientError, BotoCoreError, OSError)
"""Exceptions that mean "the storage backend call failed"."""

TRANSIENT_ERRORS = (OSError, ConnectionError, BotoConnectionError, HTTPClientError)


def make_s3_retry(attempts: int) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Retry decorator for transient transport errors.

    ``attempts`` is the total number of tries; ``1`` disables retrying.
    """
    return retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )


def make_s3_client(cfg: S3Config) -> S3Client:
    """Create a boto3 S3 client from connection settings."""
    boto_config = None
    if cfg.force_path_style:
        boto_config = BotoConfig(s3={"addressing_style": "path"})
    client: S3Client = boto3.Session().client(
        "s3",
        endpoint_url=cfg.endpoint_url or None,
        region_name=cfg.region or None,
        aws_access_key_id=cfg.access_key_id or None,
        aws_secret_access_key=cfg.secret_access_key or None,
        config=boto_config,
    )
    return client


@contextmanager
def open_s3_client(
    cfg: S3Config,
    client_factory: Callable[[S3Config], S3Client] | None = None,
) -> Iterator[S3Client]:
    """Yield a fresh client and close it on every exit path."""
    factory = client_factory or make_s3_client
    client = factory(cfg)
    try:
        yield client
    finally:
        client.close()
        logger.trace("S3 client closed")


def head_object(client: S3Client, bucket: str, key: str) -> ExistingObjectFingerprint:
    """Fetch the stored fingerprint of ``bucket/key``.

    Raises
    ------
    ProbeError
        When the object does not exist or its metadata cannot be read.

    """
    try:
        resp = client.head_object(Bucket=bucket, Key=key)
    except STORAGE_ERRORS as e:
        raise ProbeError(bucket, key, e) from e
    etag = resp.get("ETag")
    if not isinstance(etag, str):
        raise ProbeError(bucket, key, KeyError("ETag"))
    return ExistingObjectFingerprint(etag=etag)


def probe_object(
    client: S3Client,
    bucket: str,
    key: str,
) -> ExistingObjectFingerprint | None:
    """Like :func:`head_object`, but any failure means "no existing object".

    A missing object and an unreadable one are logged differently, yet both
    return ``None`` so that the caller uploads.
    """
    try:
        return head_object(client, bucket, key)
    except ProbeError as e:
        if e.not_found:
            logger.debug(f"s3://{bucket}/{key} ещё не существует")
        else:
            logger.warning(
                f"Не удалось прочитать метаданные s3://{bucket}/{key} "
                f"({e.cause}) — объект будет загружен заново"
            )
        return None


def build_put_kwargs(candidate: UploadCandidate) -> dict[str, Any]:
    """Map candidate fields onto ``PutObject`` request parameters."""
    kwargs: dict[str, Any] = {
        "Bucket": candidate.bucket,
        "Key": candidate.key,
        "Body": candidate.body,
        "ContentType": candidate.content_type,
    }
    if candidate.metadata:
        kwargs["Metadata"] = candidate.metadata
    if candidate.acl:
        kwargs["ACL"] = candidate.acl
    if candidate.content_encoding:
        kwargs["ContentEncoding"] = candidate.content_encoding
    return kwargs


def put_object(
    client: S3Client,
    candidate: UploadCandidate,
    attempts: int = 1,
) -> dict[str, Any]:
    """Upload *candidate* and return the response without ``ResponseMetadata``."""
    call = make_s3_retry(attempts)(client.put_object)
    resp = call(**build_put_kwargs(candidate)) or {}
    return {k: v for k, v in resp.items() if k != "ResponseMetadata"}
