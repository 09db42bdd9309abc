from __future__ import annotations

import copy
from typing import Any

from .base import StoreError


class InMemoryProductStore:
    """Process-local catalog with auto-increment ids.

    Used when no database or API is reachable (``store.backend: memory``) and
    as the store of record in tests.
    """

    def __init__(self, products: list[dict[str, Any]] | None = None) -> None:
        self._products: list[dict[str, Any]] = [dict(p) for p in (products or [])]
        self._next_id = max((int(p["id"]) for p in self._products if p.get("id")), default=0) + 1
        self.read_count = 0
        self.write_count = 0

    def get_products(self) -> list[dict[str, Any]]:
        self.read_count += 1
        return copy.deepcopy(self._products)

    def save_product(self, record: dict[str, Any]) -> dict[str, Any]:
        self.write_count += 1
        product_id = record.get("id")
        if product_id:
            for product in self._products:
                if str(product["id"]) == str(product_id):
                    stored_id = product["id"]
                    product.update(record)
                    product["id"] = stored_id
                    return dict(product)
            raise StoreError(f"product not found: id={product_id}", 404)

        saved = {**record, "id": self._next_id}
        self._next_id += 1
        self._products.append(saved)
        return dict(saved)

    def close(self) -> None:
        pass
