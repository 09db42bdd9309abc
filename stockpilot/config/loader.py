from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    STORE_BACKENDS,
    ApiConfig,
    AppConfig,
    DatabaseConfig,
    ImportOptions,
    StoreConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default ``config/stockpilot.yml``)
- Validate it against the packaged JSON schema
- Apply defaults and build the frozen config dataclasses
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/stockpilot.yml")

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CATALOG_REFRESH = "per_record"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: when the schema file is missing or unreadable, or the
            data violates it (missing keys, wrong types, unknown keys).
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


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    store_raw = data["store"]
    backend = os.getenv("STOCKPILOT_STORE") or store_raw["backend"]
    if backend not in STORE_BACKENDS:
        raise ConfigError(f"unknown store backend from STOCKPILOT_STORE: {backend}")
    store = StoreConfig(
        backend=backend,
        timeout_seconds=float(store_raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        catalog_refresh=store_raw.get("catalog_refresh", DEFAULT_CATALOG_REFRESH),
    )

    db_raw = data.get("database", {})
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
        table=db_raw.get("table", "products"),
    )

    api_raw = data.get("api", {})
    api = ApiConfig(
        base_url=api_raw.get("base_url"),
        token=api_raw.get("token"),
    )
    if store.backend == "http" and not api.base_url:
        raise ConfigError("config validation failed: 'api.base_url' is required for the http store")

    imp_raw = data.get("import", {})
    import_options = ImportOptions(
        extension=imp_raw.get("extension", ".csv"),
        encoding=imp_raw.get("encoding", "utf-8"),
        delimiter=imp_raw.get("delimiter", ","),
        invalid_numbers=imp_raw.get("invalid_numbers", "nan"),
        logs_directory=imp_raw.get("logs_directory", "logs"),
    )

    return AppConfig(
        store=store,
        database=db,
        api=api,
        import_options=import_options,
        default_view=data.get("default_view", "dashboard"),
    )
