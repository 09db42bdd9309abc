from __future__ import annotations

from typing import Any, Protocol

"""Product store contract used by the import pipeline."""

__all__ = [
    "ProductStore",
    "StoreError",
]


class StoreError(Exception):
    """A catalog read or product write failed (network, database, validation)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProductStore(Protocol):
    """Remote catalog: full read and single-product upsert."""

    def get_products(self) -> list[dict[str, Any]]:
        """Return the whole catalog; each entry has at least ``id`` and ``reference``."""
        ...

    def save_product(self, record: dict[str, Any]) -> dict[str, Any]:
        """Update the product ``record["id"]`` when set, create it otherwise.

        Returns the saved entity. Raises StoreError on failure.
        """
        ...

    def close(self) -> None:
        ...
