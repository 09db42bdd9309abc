"""Product store backends."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from ..models.config_models import AppConfig
from .base import ProductStore, StoreError
from .http import HttpProductStore
from .memory import InMemoryProductStore
from .postgres import PostgresProductStore, connect

__all__ = [
    "HttpProductStore",
    "InMemoryProductStore",
    "PostgresProductStore",
    "ProductStore",
    "StoreError",
    "open_store",
]


@contextmanager
def open_store(cfg: AppConfig) -> Iterator[ProductStore]:
    """Yield the store selected by ``store.backend``; closes it afterwards."""
    backend = cfg.store.backend
    if backend == "postgres":
        with connect(cfg.database, cfg.store.timeout_seconds) as conn:
            yield PostgresProductStore(conn, table=cfg.database.table)
        return

    store: ProductStore
    if backend == "http":
        if not cfg.api.base_url:
            raise StoreError("api.base_url is not configured")
        token = os.getenv("STOCKPILOT_API_TOKEN") or cfg.api.token
        store = HttpProductStore(cfg.api.base_url, token=token, timeout=cfg.store.timeout_seconds)
    else:
        store = InMemoryProductStore()
    try:
        yield store
    finally:
        store.close()
