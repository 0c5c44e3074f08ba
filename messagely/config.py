"""Configuration loading for the messagely service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .database import resolve_database_path
from .security import DEFAULT_WORK_FACTOR, MAX_WORK_FACTOR, MIN_WORK_FACTOR

ENV_CONFIG_PATH = "MESSAGELY_CONFIG"
ENV_DB_PATH = "MESSAGELY_DB_PATH"
ENV_WORK_FACTOR = "MESSAGELY_BCRYPT_WORK_FACTOR"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the directory and its collaborators."""

    database_path: Path
    bcrypt_work_factor: int = DEFAULT_WORK_FACTOR

    @staticmethod
    def from_dict(data: Dict[str, object], base_path: Path | None = None) -> "Settings":
        """Create :class:`Settings` from raw dictionary data.

        A relative ``database_path`` is resolved against ``base_path``.
        """

        raw_path = data.get("database_path")
        if raw_path:
            expanded = Path(str(raw_path)).expanduser()
            if not expanded.is_absolute() and base_path is not None:
                expanded = base_path / expanded
            database_path = expanded.resolve(strict=False)
        else:
            database_path = resolve_database_path(None)

        return Settings(
            database_path=database_path,
            bcrypt_work_factor=_parse_work_factor(data.get("bcrypt_work_factor", DEFAULT_WORK_FACTOR)),
        )


def _parse_work_factor(value: object) -> int:
    try:
        factor = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"bcrypt_work_factor must be an integer, got {value!r}") from exc
    if not MIN_WORK_FACTOR <= factor <= MAX_WORK_FACTOR:
        raise ValueError(
            f"bcrypt_work_factor must be between {MIN_WORK_FACTOR} and {MAX_WORK_FACTOR}, got {factor}"
        )
    return factor


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    return (Path(__file__).resolve().parent.parent / "config" / "messagely.yaml").resolve(strict=False)


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from YAML, then apply environment overrides.

    A missing configuration file is not an error; defaults apply instead.
    """

    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = resolve_config_path(env.get(ENV_CONFIG_PATH))

    raw: Dict[str, object] = {}
    if config_path.is_file():
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")

    settings = Settings.from_dict(raw, base_path=config_path.parent)

    db_override = env.get(ENV_DB_PATH)
    if db_override:
        settings = Settings(
            database_path=resolve_database_path(db_override),
            bcrypt_work_factor=settings.bcrypt_work_factor,
        )

    factor_override = env.get(ENV_WORK_FACTOR)
    if factor_override:
        settings = Settings(
            database_path=settings.database_path,
            bcrypt_work_factor=_parse_work_factor(factor_override),
        )

    return settings


__all__ = ["Settings", "load_settings", "resolve_config_path"]
