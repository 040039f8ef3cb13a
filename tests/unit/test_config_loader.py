from __future__ import annotations

from pathlib import Path

import pytest

from family_camp.config.loader import ConfigError, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.event_title == "Test Camp"
    assert cfg.require_admin is False
    assert cfg.tables.registrants == "registrants"
    assert cfg.output_directory == "./exports"
    assert cfg.database.port == 5432
    assert cfg.database.dsn is None


def test_defaults_applied(temp_workdir: Path):
    p = temp_workdir / "config" / "camp.yml"
    p.write_text("require_admin: true\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.event_title == "Family Camp"
    assert cfg.require_admin is True
    assert cfg.tables.profiles == "profiles"
    assert cfg.output_directory == "."


def test_empty_file_uses_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "camp.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p).event_title == "Family Camp"


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "camp.yml"
    p.write_text("event_title: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


@pytest.mark.parametrize(
    "text",
    [
        "unknown_key: 1\n",
        "require_admin: maybe\n",
        "tables:\n  registrants: 'drop table x;'\n",
        "database:\n  port: '5432'\n",
    ],
)
def test_schema_violations(temp_workdir: Path, text: str):
    p = temp_workdir / "config" / "camp.yml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)
