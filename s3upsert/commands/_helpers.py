"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from s3upsert.config import S3Config, UploadConfig, load_upload_config
from s3upsert.exceptions import ConfigError

if TYPE_CHECKING:
    import argparse

    from s3upsert.models import UploadOutcome


def load_configs(args: argparse.Namespace) -> tuple[S3Config, UploadConfig]:
    """Load connection and upload settings, exiting on a broken config."""
    config_path = Path(args.config) if args.config else None
    try:
        return S3Config.load(config_path), load_upload_config(config_path)
    except ConfigError as e:
        sys.exit(f"Ошибка конфигурации: {e}")


def log_outcome(outcome: UploadOutcome) -> None:
    """Log a single outcome at a level matching its status."""
    data = outcome.to_dict()
    if "error" in data:
        logger.error(f"{outcome.key}: {outcome.status.value} — {data['error']}")
    else:
        logger.info(f"{outcome.key}: {outcome.status.value}")


def write_outcomes_json(
    outcomes: list[UploadOutcome] | None,
    path: Path,
) -> None:
    """Write outcomes to *path* as JSON (``null`` when nothing changed)."""
    payload = None if outcomes is None else [o.to_dict() for o in outcomes]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, default=str) + "\n",
        encoding="utf-8",
    )
    logger.info(f"Результат сохранён в {path}")
