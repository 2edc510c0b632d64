"""Resolve upload parameters from static defaults and per-message values.

A parameter configured statically always wins; the per-message value is
used only when the static one is empty.  Resolution produces a fresh
:class:`UploadCandidate` and never writes back into the defaults mapping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from s3upsert.exceptions import CandidateValidationError
from s3upsert.validation import validate_candidate

if TYPE_CHECKING:
    from collections.abc import Mapping

    from s3upsert.models import UploadCandidate

_T = TypeVar("_T")

# (field, human-readable name)
_REQUIRED = (
    ("bucket", "bucket"),
    ("key", "object key"),
    ("body", "body data"),
    ("contentType", "Content-Type"),
)
_OPTIONAL = ("metadata", "acl", "contentEncoding")


def _is_empty(value: object) -> bool:
    return value is None or value in ("", b"")


def resolve_optional(static: _T | None, dynamic: _T | None) -> _T | None:
    """Return *static* if set, else *dynamic* if set, else ``None``."""
    if not _is_empty(static):
        return static
    if not _is_empty(dynamic):
        return dynamic
    return None


def resolve(static: _T | None, dynamic: _T | None, field_name: str) -> _T:
    """Return *static* if set, else *dynamic*; raise when both are empty."""
    value = resolve_optional(static, dynamic)
    if value is None:
        raise CandidateValidationError(f"Не задано: {field_name}", field=field_name)
    return value


def resolve_flag(static: object, dynamic: object) -> bool:
    """Boolean flag that is on when either source turns it on."""
    return bool(static) or bool(dynamic)


def build_candidate(
    defaults: Mapping[str, object],
    message: Mapping[str, object],
) -> UploadCandidate:
    """Resolve every candidate field from *defaults* then *message*.

    Raises
    ------
    CandidateValidationError
        When a required field is missing from both sources, or the resolved
        values do not form a valid candidate.

    """
    resolved: dict[str, object] = {}
    for field, name in _REQUIRED:
        resolved[field] = resolve(defaults.get(field), message.get(field), name)
    for field in _OPTIONAL:
        value = resolve_optional(defaults.get(field), message.get(field))
        if value is not None:
            resolved[field] = value
    return validate_candidate(resolved)
