from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from ..models.parse_result import ProductRecord
from ..store.base import ProductStore

"""Insert-or-update decision for one incoming record.

The business key is ``reference``, compared as an exact, case-sensitive
string. A match hands its ``id`` to the record so the store updates that
product; otherwise the record is left as is and the store creates it.
"""

logger = logging.getLogger(__name__)

PER_RECORD = "per_record"
PER_BATCH = "per_batch"


class Decision(Enum):
    INSERT = "insert"
    UPDATE = "update"


def find_existing(reference: Any, catalog: list[dict[str, Any]]) -> dict[str, Any] | None:
    """First catalog entry whose reference equals ``reference``, else None."""
    for product in catalog:
        if product.get("reference") == reference:
            return product
    return None


def reconcile(record: ProductRecord, catalog: list[dict[str, Any]]) -> Decision:
    existing = find_existing(record.get("reference"), catalog)
    if existing is None:
        return Decision.INSERT
    record["id"] = existing["id"]
    return Decision.UPDATE


class CatalogSource:
    """Catalog snapshots handed to the reconciliation step.

    ``per_record`` reads the whole catalog from the store before every
    record. ``per_batch`` reads it once and keeps it current with the
    products saved during the batch, so a reference repeated further down
    the file still resolves to the product created for it.
    """

    def __init__(self, store: ProductStore, policy: str = PER_RECORD) -> None:
        if policy not in (PER_RECORD, PER_BATCH):
            raise ValueError(f"unknown catalog refresh policy: {policy}")
        self.store = store
        self.policy = policy
        self._snapshot: list[dict[str, Any]] | None = None

    def current(self) -> list[dict[str, Any]]:
        if self.policy == PER_RECORD:
            return self.store.get_products()
        if self._snapshot is None:
            self._snapshot = self.store.get_products()
            logger.debug("catalog snapshot loaded: %d product(s)", len(self._snapshot))
        return self._snapshot

    def remember(self, saved: dict[str, Any]) -> None:
        """Merge a saved product into the batch snapshot (per_batch only)."""
        if self.policy != PER_BATCH or self._snapshot is None:
            return
        if not saved.get("id"):
            return
        for i, product in enumerate(self._snapshot):
            if str(product.get("id")) == str(saved["id"]):
                self._snapshot[i] = saved
                return
        self._snapshot.append(saved)
