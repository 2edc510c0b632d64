"""Validation of upload candidates and candidate batches.

Everything here runs before the first request to the storage backend, so
a rejected batch never causes partial work.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

from pydantic import ValidationError

from s3upsert.exceptions import CandidateValidationError
from s3upsert.formats import is_json_string
from s3upsert.models import UploadCandidate


def _first_error(exc: ValidationError) -> tuple[str | None, str]:
    """Return ``(field, message)`` of the first pydantic error."""
    err = exc.errors()[0]
    loc = err.get("loc") or ()
    field = str(loc[0]) if loc else None
    return field, err.get("msg", str(exc))


def validate_candidate(
    raw: Mapping[str, object] | UploadCandidate,
    *,
    index: int | None = None,
) -> UploadCandidate:
    """Build an :class:`UploadCandidate` from *raw* or raise.

    Raises
    ------
    CandidateValidationError
        When *raw* is not a mapping, a required field is missing or empty,
        or metadata / ACL / content encoding are malformed.

    """
    if isinstance(raw, UploadCandidate):
        return raw
    if not isinstance(raw, Mapping):
        raise CandidateValidationError(
            f"ожидался объект, получено {type(raw).__name__}", index=index
        )
    try:
        return UploadCandidate.model_validate(dict(raw))
    except ValidationError as e:
        field, message = _first_error(e)
        if field:
            message = f"поле {field!r}: {message}"
        raise CandidateValidationError(message, index=index, field=field) from e


def validate_batch(raw: object) -> list[UploadCandidate]:
    """Validate a whole batch; one bad element rejects all of them.

    *raw* may be a list / tuple of candidates or a JSON string holding an
    array.  The batch must not be empty.
    """
    if isinstance(raw, str):
        if not is_json_string(raw):
            raise CandidateValidationError("Неверный формат списка объектов")
        raw = json.loads(raw)
    if not isinstance(raw, (list, tuple)):
        raise CandidateValidationError("Список объектов не является массивом")
    if not raw:
        raise CandidateValidationError("Список объектов пуст")
    return [validate_candidate(item, index=i) for i, item in enumerate(raw)]
