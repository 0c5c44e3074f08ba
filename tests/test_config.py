from __future__ import annotations

from pathlib import Path

import pytest

from messagely.config import Settings, load_settings, resolve_config_path
from messagely.security import DEFAULT_WORK_FACTOR


def test_missing_config_file_uses_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.yaml", environ={})

    assert settings.bcrypt_work_factor == DEFAULT_WORK_FACTOR
    assert settings.database_path.name == "messagely.sqlite3"


def test_yaml_values_are_loaded_relative_to_file(tmp_path: Path) -> None:
    config = tmp_path / "messagely.yaml"
    config.write_text("database_path: data/app.sqlite3\nbcrypt_work_factor: 10\n", encoding="utf-8")

    settings = load_settings(config, environ={})

    assert settings == Settings(
        database_path=(tmp_path / "data" / "app.sqlite3").resolve(),
        bcrypt_work_factor=10,
    )


def test_environment_overrides_yaml(tmp_path: Path) -> None:
    config = tmp_path / "messagely.yaml"
    config.write_text("bcrypt_work_factor: 10\n", encoding="utf-8")
    db_path = tmp_path / "override.sqlite3"

    settings = load_settings(
        config,
        environ={"MESSAGELY_DB_PATH": str(db_path), "MESSAGELY_BCRYPT_WORK_FACTOR": "6"},
    )

    assert settings.database_path == db_path.resolve()
    assert settings.bcrypt_work_factor == 6


def test_config_path_from_environment(tmp_path: Path) -> None:
    config = tmp_path / "custom.yaml"
    config.write_text("bcrypt_work_factor: 7\n", encoding="utf-8")

    assert load_settings(environ={"MESSAGELY_CONFIG": str(config)}).bcrypt_work_factor == 7
    assert resolve_config_path(None).name == "messagely.yaml"


@pytest.mark.parametrize("value", ["fast", "2", "40"])
def test_invalid_work_factor_rejected(tmp_path: Path, value: str) -> None:
    with pytest.raises(ValueError):
        load_settings(tmp_path / "absent.yaml", environ={"MESSAGELY_BCRYPT_WORK_FACTOR": value})


def test_non_mapping_yaml_rejected(tmp_path: Path) -> None:
    config = tmp_path / "messagely.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(config, environ={})
