from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default config/camp.yml)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults for every optional key
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/camp.yml")

DEFAULT_EVENT_TITLE = "Family Camp"
DEFAULT_REGISTRANTS_TABLE = "registrants"
DEFAULT_PROFILES_TABLE = "profiles"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Fallback connection settings. Environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TablesConfig:
    registrants: str = DEFAULT_REGISTRANTS_TABLE
    profiles: str = DEFAULT_PROFILES_TABLE


@dataclass(frozen=True)
class CampConfig:
    event_title: str = DEFAULT_EVENT_TITLE
    require_admin: bool = False
    user_id: str | None = None
    tables: TablesConfig = field(default_factory=TablesConfig)
    output_directory: str = "."
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the config data
            fails validation (unknown keys, wrong types, bad table names).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> CampConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    tables_raw = data.get("tables") or {}
    export_raw = data.get("export") or {}
    return CampConfig(
        event_title=data.get("event_title", DEFAULT_EVENT_TITLE),
        require_admin=bool(data.get("require_admin", False)),
        user_id=data.get("user_id"),
        tables=TablesConfig(
            registrants=tables_raw.get("registrants", DEFAULT_REGISTRANTS_TABLE),
            profiles=tables_raw.get("profiles", DEFAULT_PROFILES_TABLE),
        ),
        output_directory=export_raw.get("output_directory", "."),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
    )
