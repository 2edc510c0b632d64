"""Configuration loading with priority: env > config file > defaults."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

from s3upsert.exceptions import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable

_T = TypeVar("_T", bound=BaseModel)

CONFIG_DIR = Path.home() / ".config" / "s3upsert"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise S3UPSERT_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("S3UPSERT_CONFIG")
    return Path(path) if path else CONFIG_PATH


def _load_raw_yaml(path: Path) -> dict[str, object]:
    """Load a YAML file and return its top-level mapping (or empty dict)."""
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {path}; expected mapping.")
        return {}
    return data


def _parse_section(model: type[_T], raw: object, section_key: str) -> _T:
    """Build *model* from a raw YAML section, ignoring unknown keys."""
    if raw is None:
        return model()
    if not isinstance(raw, dict):
        msg = f"Config section {section_key!r} must be a mapping."
        raise ConfigError(msg)
    filtered = {k: v for k, v in raw.items() if k in model.model_fields}
    try:
        return model(**filtered)
    except ValidationError as e:
        msg = f"Invalid {section_key!r} config section: {e}"
        raise ConfigError(msg) from e


def _load_section(
    section_key: str,
    parse_fn: Callable[[object], _T],
    config_path: Path | None = None,
) -> _T:
    """Load a config section: path, raw YAML, then parse with *parse_fn*."""
    path = get_config_path(config_path)
    data = _load_raw_yaml(path)
    return parse_fn(data.get(section_key))


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() in _TRUE_VALUES


class S3Config(BaseModel):
    """Connection settings for the S3-compatible endpoint.

    Empty values fall through to boto3's own credential and region chain.
    """

    endpoint_url: str = ""
    region: str = ""
    force_path_style: bool | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> S3Config:
        """Load the ``s3`` section from a YAML file (empty config if missing)."""
        if not path.is_file():
            return cls()
        logger.trace(f"Loading config from {path}")
        return _parse_section(cls, _load_raw_yaml(path).get("s3"), "s3")

    @classmethod
    def from_env(cls) -> S3Config:
        """Build config from environment variables."""
        return cls(
            endpoint_url=os.environ.get("S3_ENDPOINT_URL", ""),
            region=os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION", ""),
            force_path_style=_env_flag("S3_FORCE_PATH_STYLE"),
            access_key_id=os.environ.get("AWS_ACCESS_KEY_ID"),
            secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY"),
        )

    def merge(self, override: S3Config) -> S3Config:
        """Return a new config where *override* values take priority over self.

        Only non-empty / non-None values from *override* win; an explicit
        ``force_path_style=False`` does override.
        """
        return S3Config(
            endpoint_url=override.endpoint_url or self.endpoint_url,
            region=override.region or self.region,
            force_path_style=(
                self.force_path_style
                if override.force_path_style is None
                else override.force_path_style
            ),
            access_key_id=override.access_key_id or self.access_key_id,
            secret_access_key=override.secret_access_key or self.secret_access_key,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> S3Config:
        """Merge file and env: file < env."""
        file_cfg = cls.from_file(get_config_path(config_path))
        return file_cfg.merge(cls.from_env())


class UploadConfig(BaseModel):
    """Behaviour of the upload commands."""

    upsert: bool = False
    retries: int = 1
    stop_on_error: bool = True
    show_progress: bool = True


def _parse_upload_section(raw: object) -> UploadConfig:
    """Parse ``upload`` section from raw YAML value."""
    cfg = _parse_section(UploadConfig, raw, "upload")
    if cfg.retries < 1:
        msg = f"upload.retries must be >= 1, got {cfg.retries}"
        raise ConfigError(msg)
    return cfg


def load_upload_config(config_path: Path | None = None) -> UploadConfig:
    """Load the ``upload`` section from the config YAML.

    ``S3UPSERT_UPSERT`` overrides the ``upsert`` flag when set.
    """
    cfg = _load_section("upload", _parse_upload_section, config_path)
    env_upsert = _env_flag("S3UPSERT_UPSERT")
    if env_upsert is not None:
        cfg = cfg.model_copy(update={"upsert": env_upsert})
    return cfg


def save_config(
    s3: S3Config | None = None,
    upload: UploadConfig | None = None,
    config_path: Path | None = None,
) -> Path:
    """Write the given sections to the config YAML, preserving the others."""
    path = get_config_path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    existing = _load_raw_yaml(path)
    if s3 is not None:
        existing["s3"] = s3.model_dump(exclude_none=True)
    if upload is not None:
        existing["upload"] = upload.model_dump()
    content = yaml.safe_dump(existing, default_flow_style=False, sort_keys=False)
    if not content.endswith("\n"):
        content += "\n"
    path.write_text(content, encoding="utf-8")
    logger.info(f"Config saved to {path}")
    return path
