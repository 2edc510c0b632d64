"""Implementation of the ``setup`` CLI command."""

from __future__ import annotations

import getpass
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from s3upsert.config import S3Config, get_config_path, save_config
from s3upsert.exceptions import ConfigError

if TYPE_CHECKING:
    import argparse


def _ask(label: str, default: str) -> str:
    prompt = f"{label} [{default}]: " if default else f"{label}: "
    return input(prompt).strip() or default


def _ask_path_style(default: bool | None) -> bool | None:
    hint = "y/n"
    if default is not None:
        hint = "Y/n" if default else "y/N"
    while True:
        answer = input(f"Path-style адресация бакетов [{hint}]: ").strip().lower()
        if not answer:
            return default
        if answer in ("y", "n"):
            return answer == "y"


def run_setup(args: argparse.Namespace) -> None:
    """Interactively ask for S3 connection settings and save them."""
    config_path = get_config_path(Path(args.config) if args.config else None)
    try:
        existing = S3Config.from_file(config_path)
    except ConfigError as e:
        sys.exit(f"Ошибка конфигурации: {e}")

    endpoint_url = _ask("Endpoint S3 (пусто — AWS)", existing.endpoint_url)
    region = _ask("Регион", existing.region)
    force_path_style = _ask_path_style(existing.force_path_style)

    key_default = existing.access_key_id or ""
    access_key_id = _ask("Access key ID (необязательно)", key_default)
    secret_access_key = getpass.getpass("Secret access key: ")
    if not secret_access_key and existing.secret_access_key:
        secret_access_key = existing.secret_access_key
        logger.info("Секретный ключ не изменён (использован существующий).")
    if access_key_id and not secret_access_key:
        logger.warning("Секретный ключ не указан — его можно добавить позже.")

    cfg = S3Config(
        endpoint_url=endpoint_url,
        region=region,
        force_path_style=force_path_style,
        access_key_id=access_key_id or None,
        secret_access_key=secret_access_key or None,
    )
    saved_path = save_config(s3=cfg, config_path=config_path)
    logger.info(f"Готово! Конфигурация сохранена в {saved_path}")
