from __future__ import annotations

from dataclasses import dataclass

"""Configuration dataclasses.

Built by ``stockpilot.config.loader`` from the validated YAML file; defaults
live in the loader so these stay plain value objects.
"""

STORE_BACKENDS = ("memory", "postgres", "http")


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL connection fallback.

    Environment variables (DATABASE_URL / PGDSN / PG*) take precedence.
    """
    host: str | None
    port: int | None
    user: str | None
    password: str | None
    database: str | None
    dsn: str | None
    table: str = "products"


@dataclass(frozen=True)
class ApiConfig:
    """Remote product API used by the ``http`` store backend."""
    base_url: str | None
    token: str | None = None


@dataclass(frozen=True)
class StoreConfig:
    backend: str  # memory | postgres | http
    timeout_seconds: float  # per store call deadline
    catalog_refresh: str  # per_record | per_batch


@dataclass(frozen=True)
class ImportOptions:
    extension: str  # accepted file name suffix
    encoding: str  # text decoding of the whole file
    delimiter: str  # field separator for the tokenizer
    invalid_numbers: str  # nan | zero | reject
    logs_directory: str  # where errors-*.log files go


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    store: StoreConfig
    database: DatabaseConfig
    api: ApiConfig
    import_options: ImportOptions
    default_view: str = "dashboard"
