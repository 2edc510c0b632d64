"""Conditional (upsert) upload of one object or an ordered batch of objects.

In conditional mode every candidate is probed with a HEAD request first.
When the stored ETag equals the MD5 digest of the new body, the upload is
skipped.  A failed probe is treated as "no existing object", so the engine
errs towards uploading and never skips on uncertainty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from tqdm import tqdm

from s3upsert.config import UploadConfig
from s3upsert.exceptions import UploadError
from s3upsert.fingerprint import is_identical
from s3upsert.models import UploadOutcome, UploadStats, UploadStatus
from s3upsert.s3_utils import STORAGE_ERRORS, open_s3_client, probe_object, put_object
from s3upsert.validation import validate_batch, validate_candidate

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Mapping, Sequence

    from s3upsert.config import S3Config
    from s3upsert.models import UploadCandidate
    from s3upsert.s3_types import S3Client


# ---------------------------------------------------------------------------
# Single candidate
# ---------------------------------------------------------------------------


def _needs_upload(client: S3Client, candidate: UploadCandidate) -> bool:
    """Probe the stored object and compare fingerprints."""
    existing = probe_object(client, candidate.bucket, candidate.key)
    if existing is None:
        return True
    return not is_identical(existing.etag, candidate.body)


def _upload(client: S3Client, candidate: UploadCandidate, retries: int) -> UploadOutcome:
    """Write *candidate* unconditionally and wrap the result in an outcome."""
    try:
        result = put_object(client, candidate, attempts=retries)
    except STORAGE_ERRORS as e:
        logger.error(f"Не удалось загрузить {candidate.location}: {e}")
        return UploadOutcome.failed(
            candidate.key, UploadError(candidate.bucket, candidate.key, e)
        )
    logger.info(f"Загружено: {candidate.location}")
    return UploadOutcome.uploaded(candidate.key, result)


def _skip_if_identical(
    client: S3Client, candidate: UploadCandidate
) -> UploadOutcome | None:
    """Return a ``SKIPPED_IDENTICAL`` outcome when the stored copy matches."""
    if _needs_upload(client, candidate):
        return None
    logger.warning(
        f"Объект {candidate.key} не загружен: содержимое совпадает "
        f"с уже существующим в {candidate.location}"
    )
    return UploadOutcome.skipped(candidate.key)


def conditional_upload(
    client: S3Client,
    candidate: UploadCandidate,
    conditional: bool,
    *,
    retries: int = 1,
) -> UploadOutcome:
    """Upload *candidate* unless *conditional* is set and it is unchanged.

    Issues at most one HEAD (only when *conditional*) and one PUT.  Upload
    errors come back as a ``FAILED`` outcome; probe errors never surface.
    """
    if conditional:
        skipped = _skip_if_identical(client, candidate)
        if skipped is not None:
            return skipped
    return _upload(client, candidate, retries)


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


def _cancelled(cancel_event: threading.Event | None, done: int, total: int) -> bool:
    if cancel_event is None or not cancel_event.is_set():
        return False
    logger.warning(f"Загрузка отменена: обработано {done} из {total} объектов")
    return True


def conditional_upload_batch(
    client: S3Client,
    candidates: Sequence[UploadCandidate | Mapping[str, object]] | str,
    conditional: bool,
    *,
    stop_on_error: bool = True,
    cancel_event: threading.Event | None = None,
    progress: Callable[[int], None] | None = None,
    show_progress: bool = True,
    retries: int = 1,
) -> list[UploadOutcome] | None:
    """Run :func:`conditional_upload` over *candidates* in input order.

    The whole batch is validated before the first request; a single invalid
    element raises :class:`CandidateValidationError` and nothing is sent.

    Returns the outcomes in input order, or ``None`` when every candidate
    was skipped as identical.  With *stop_on_error* the batch stops at the
    first failed upload and the outcomes so far (ending with the failure)
    are returned.  Once *cancel_event* is set no further request is
    sent, including the PUT of a candidate whose probe was already in flight.
    """
    batch = validate_batch(candidates)
    total = len(batch)
    outcomes: list[UploadOutcome] = []

    with tqdm(
        batch, desc="Uploading to S3", unit="obj", leave=False, disable=not show_progress
    ) as bar:
        for i, candidate in enumerate(bar):
            if _cancelled(cancel_event, i, total):
                return outcomes
            outcome = _skip_if_identical(client, candidate) if conditional else None
            if outcome is None:
                # A cancel may have arrived while HEAD was in flight.
                if _cancelled(cancel_event, i, total):
                    return outcomes
                outcome = _upload(client, candidate, retries)
            outcomes.append(outcome)
            if progress is not None:
                progress(int((i + 1) * 100 / total))
            if outcome.status is UploadStatus.FAILED and stop_on_error:
                logger.error(
                    f"Пакетная загрузка прервана на объекте #{i} ({candidate.key}); "
                    f"{total - i - 1} объектов не обработано"
                )
                return outcomes

    if all(o.status is UploadStatus.SKIPPED_IDENTICAL for o in outcomes):
        logger.warning(
            "Все объекты совпадают с уже существующими в бакете — ничего не загружено"
        )
        return None

    stats = UploadStats.from_outcomes(outcomes)
    logger.info(
        f"S3 upload: {stats.uploaded} загружено, "
        f"{stats.skipped_identical} без изменений, {stats.failed} ошибок "
        f"(всего {stats.total})"
    )
    return outcomes


class ConditionalUploader:
    """Conditional uploads bound to one client and one :class:`UploadConfig`."""

    def __init__(self, client: S3Client, cfg: UploadConfig | None = None) -> None:
        self._client = client
        self._cfg = cfg or UploadConfig()

    def upload(
        self,
        candidate: UploadCandidate | Mapping[str, object],
        *,
        conditional: bool | None = None,
    ) -> UploadOutcome:
        """Validate and upload a single candidate."""
        return conditional_upload(
            self._client,
            validate_candidate(candidate),
            self._cfg.upsert if conditional is None else conditional,
            retries=self._cfg.retries,
        )

    def upload_batch(
        self,
        candidates: Sequence[UploadCandidate | Mapping[str, object]] | str,
        *,
        conditional: bool | None = None,
        cancel_event: threading.Event | None = None,
        progress: Callable[[int], None] | None = None,
    ) -> list[UploadOutcome] | None:
        """Validate and upload a batch; see :func:`conditional_upload_batch`."""
        return conditional_upload_batch(
            self._client,
            candidates,
            self._cfg.upsert if conditional is None else conditional,
            stop_on_error=self._cfg.stop_on_error,
            cancel_event=cancel_event,
            progress=progress,
            show_progress=self._cfg.show_progress,
            retries=self._cfg.retries,
        )


# ---------------------------------------------------------------------------
# One-shot entry points (own the client lifecycle)
# ---------------------------------------------------------------------------


def upsert_object(
    s3_cfg: S3Config,
    raw_candidate: UploadCandidate | Mapping[str, object],
    conditional: bool,
    *,
    upload_cfg: UploadConfig | None = None,
    client_factory: Callable[[S3Config], S3Client] | None = None,
) -> UploadOutcome:
    """Validate, open a client, upload one object and close the client."""
    candidate = validate_candidate(raw_candidate)
    with open_s3_client(s3_cfg, client_factory) as client:
        return ConditionalUploader(client, upload_cfg).upload(
            candidate, conditional=conditional
        )


def upsert_objects(
    s3_cfg: S3Config,
    raw_candidates: Sequence[UploadCandidate | Mapping[str, object]] | str,
    conditional: bool,
    *,
    upload_cfg: UploadConfig | None = None,
    client_factory: Callable[[S3Config], S3Client] | None = None,
    cancel_event: threading.Event | None = None,
) -> list[UploadOutcome] | None:
    """Validate a batch, open a client, upload and close the client.

    Validation happens before the client is created, so an invalid batch
    never touches the network.
    """
    batch = validate_batch(raw_candidates)
    with open_s3_client(s3_cfg, client_factory) as client:
        return ConditionalUploader(client, upload_cfg).upload_batch(
            batch, conditional=conditional, cancel_event=cancel_event
        )
