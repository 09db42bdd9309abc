from __future__ import annotations

import logging
import math
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2
import psycopg2.extras
from psycopg2 import sql

from ..models.config_models import DatabaseConfig
from .base import StoreError

"""PostgreSQL product store.

Every write runs in its own transaction: a failing product is rolled back
without touching the ones already saved. Only columns that exist in the
target table are written; other record keys are ignored.
"""

logger = logging.getLogger(__name__)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Build the connection string.

    Resolution order:
        1. DATABASE_URL / PGDSN environment variables, then ``database.dsn``
        2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. the ``database`` config section for whatever is still missing
    """
    dsn_env = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn_env:
        return dsn_env
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def connect(db_cfg: DatabaseConfig, timeout_seconds: float) -> Iterator[Any]:
    """Open a psycopg2 connection with connect and statement deadlines."""
    try:
        conn = psycopg2.connect(
            resolve_dsn(db_cfg),
            connect_timeout=max(1, math.ceil(timeout_seconds)),
            options=f"-c statement_timeout={int(timeout_seconds * 1000)}",
        )
    except psycopg2.Error as e:
        raise StoreError(f"database connection failed: {e}") from e
    conn.autocommit = False
    try:
        yield conn
    finally:
        if not conn.closed:
            conn.close()


class PostgresProductStore:
    def __init__(self, conn: Any, table: str = "products") -> None:
        self._conn = conn
        self.table = table
        self._columns: set[str] | None = None

    @property
    def columns(self) -> set[str]:
        """Column names of the product table (read once)."""
        if self._columns is None:
            rows = self._fetch(
                sql.SQL(
                    "SELECT column_name FROM information_schema.columns"
                    " WHERE table_schema = current_schema() AND table_name = %s"
                ),
                (self.table,),
            )
            self._columns = {r["column_name"] for r in rows}
            if not self._columns:
                raise StoreError(f"table not found or has no columns: {self.table}")
            logger.debug("table=%s columns=%s", self.table, sorted(self._columns))
        return self._columns

    def _fetch(self, query: sql.Composable, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        try:
            with self._conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(r) for r in cur.fetchall()]
            self._conn.commit()
        except psycopg2.Error as e:
            self._conn.rollback()
            raise StoreError(str(e).strip()) from e
        return rows

    def get_products(self) -> list[dict[str, Any]]:
        query = sql.SQL("SELECT * FROM {} ORDER BY id").format(sql.Identifier(self.table))
        return self._fetch(query)

    def save_product(self, record: dict[str, Any]) -> dict[str, Any]:
        columns = self.columns
        fields = [k for k in record if k in columns and k != "id"]
        ignored = [k for k in record if k not in columns]
        if ignored:
            logger.debug("reference=%s ignored fields=%s", record.get("reference"), ignored)
        if not fields:
            raise StoreError("no writable product fields")

        table = sql.Identifier(self.table)
        product_id = record.get("id")
        if product_id:
            query = sql.SQL("UPDATE {} SET {} WHERE id = %s RETURNING *").format(
                table,
                sql.SQL(", ").join(
                    sql.SQL("{} = %s").format(sql.Identifier(f)) for f in fields
                ),
            )
            params = tuple(record[f] for f in fields) + (product_id,)
        else:
            query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
                table,
                sql.SQL(", ").join(sql.Identifier(f) for f in fields),
                sql.SQL(", ").join(sql.Placeholder() for _ in fields),
            )
            params = tuple(record[f] for f in fields)

        rows = self._fetch(query, params)
        if not rows:
            raise StoreError(f"product not found: id={product_id}", 404)
        return rows[0]

    def close(self) -> None:
        pass
