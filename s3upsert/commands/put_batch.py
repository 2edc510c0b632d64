"""Implementation of the ``s3upsert put-batch`` command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from s3upsert.commands._helpers import load_configs, log_outcome, write_outcomes_json
from s3upsert.exceptions import CandidateValidationError
from s3upsert.models import UploadStats, UploadStatus
from s3upsert.params import resolve_flag
from s3upsert.uploader import upsert_objects

if TYPE_CHECKING:
    import argparse


def run_put_batch(args: argparse.Namespace) -> None:
    """Run the ``put-batch`` command."""
    s3_cfg, upload_cfg = load_configs(args)
    objects_path = Path(args.objects)
    if not objects_path.is_file():
        sys.exit(f"Ошибка: файл {objects_path} не найден")

    overrides: dict[str, object] = {}
    if args.continue_on_error:
        overrides["stop_on_error"] = False
    if args.no_progress:
        overrides["show_progress"] = False
    upload_cfg = upload_cfg.model_copy(update=overrides)

    try:
        outcomes = upsert_objects(
            s3_cfg,
            objects_path.read_text(encoding="utf-8"),
            resolve_flag(upload_cfg.upsert, args.upsert),
            upload_cfg=upload_cfg,
        )
    except CandidateValidationError as e:
        sys.exit(f"Ошибка: {e}")

    if outcomes is not None:
        for outcome in outcomes:
            log_outcome(outcome)
        stats = UploadStats.from_outcomes(outcomes)
        logger.info(
            f"Итого: {stats.uploaded} загружено, {stats.skipped_identical} "
            f"без изменений, {stats.failed} ошибок"
        )
    if args.output:
        write_outcomes_json(outcomes, Path(args.output))
    if outcomes and any(o.status is UploadStatus.FAILED for o in outcomes):
        sys.exit(1)
