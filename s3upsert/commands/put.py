"""Implementation of the ``s3upsert put`` command."""

from __future__ import annotations

import mimetypes
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from s3upsert.commands._helpers import load_configs, log_outcome, write_outcomes_json
from s3upsert.exceptions import CandidateValidationError
from s3upsert.models import UploadStatus
from s3upsert.params import build_candidate, resolve_flag
from s3upsert.uploader import upsert_object

if TYPE_CHECKING:
    import argparse


def _read_body(args: argparse.Namespace) -> bytes | str | None:
    if args.file:
        path = Path(args.file)
        if not path.is_file():
            sys.exit(f"Ошибка: файл {path} не найден")
        return path.read_bytes()
    return args.body


def _guess_content_type(args: argparse.Namespace) -> str | None:
    if args.content_type:
        return args.content_type
    if args.file:
        guessed, _ = mimetypes.guess_type(args.file)
        return guessed or "application/octet-stream"
    return None


def run_put(args: argparse.Namespace) -> None:
    """Run the ``put`` command."""
    s3_cfg, upload_cfg = load_configs(args)
    message = {
        "bucket": args.bucket,
        "key": args.key,
        "body": _read_body(args),
        "contentType": _guess_content_type(args),
        "metadata": args.metadata,
        "acl": args.acl,
        "contentEncoding": args.content_encoding,
    }
    try:
        candidate = build_candidate({}, message)
    except CandidateValidationError as e:
        sys.exit(f"Ошибка: {e}")

    outcome = upsert_object(
        s3_cfg,
        candidate,
        resolve_flag(upload_cfg.upsert, args.upsert),
        upload_cfg=upload_cfg,
    )
    log_outcome(outcome)
    if args.output:
        write_outcomes_json([outcome], Path(args.output))
    if outcome.status is UploadStatus.FAILED:
        sys.exit(1)
