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
- Load YAML config (default config/import.yml)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults (max_workers=4, error_log_dir=./logs)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_CONFIG_PATH = Path("config/import.yml")
DEFAULT_MAX_WORKERS = 4
DEFAULT_ERROR_LOG_DIR = "./logs"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    max_workers: int = DEFAULT_MAX_WORKERS  # Concurrent award saves
    error_log_dir: str = DEFAULT_ERROR_LOG_DIR  # JSON Lines error log directory
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Args:
        data: Configuration data to validate

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data fails schema validation (unknown keys, wrong types, ...).
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


def load_config(path: Path) -> ImportConfig:
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
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return ImportConfig(
        max_workers=data.get("max_workers", DEFAULT_MAX_WORKERS),
        error_log_dir=data.get("error_log_dir", DEFAULT_ERROR_LOG_DIR),
        database=db,
    )
