from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import Any, Protocol

from ..store.base import ProductStore

logger = logging.getLogger(__name__)

Output = Callable[[str], None]


class View(Protocol):
    name: str

    @property
    def is_initialized(self) -> bool:
        ...

    def init(self) -> None:
        ...

    def refresh(self) -> None:
        """Re-render from the store; returns once the output is complete."""
        ...


def _number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


class _BaseView:
    name = ""

    def __init__(self, output: Output = print) -> None:
        self._output = output
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        self.refresh()
        self._initialized = True
        logger.debug("view %s initialized", self.name)

    def refresh(self) -> None:
        raise NotImplementedError


class DashboardView(_BaseView):
    name = "dashboard"

    def __init__(self, store: ProductStore, output: Output = print) -> None:
        super().__init__(output)
        self.store = store

    def refresh(self) -> None:
        products = self.store.get_products()
        low_stock = [
            p for p in products
            if _number(p.get("stock_actuel")) <= _number(p.get("stock_minimum"))
        ]
        stock_value = sum(_number(p.get("prix_achat")) * _number(p.get("stock_actuel")) for p in products)
        self._output(f"Products: {len(products)}")
        self._output(f"Low stock alerts: {len(low_stock)}")
        self._output(f"Stock value: {stock_value:.2f}")
        for p in low_stock:
            self._output(f"  ! {p.get('reference')} {p.get('designation', '')} ({p.get('stock_actuel')})")


class ProductsView(_BaseView):
    name = "products"
    COLUMNS = ("reference", "designation", "categorie", "stock_actuel", "prix_vente")

    def __init__(self, store: ProductStore, output: Output = print) -> None:
        super().__init__(output)
        self.store = store
        self.rendered: list[dict[str, Any]] = []

    def refresh(self) -> None:
        self.rendered = self.store.get_products()
        self._output(" | ".join(self.COLUMNS))
        for p in self.rendered:
            self._output(" | ".join(str(p.get(c, "")) for c in self.COLUMNS))
        self._output(f"{len(self.rendered)} product(s)")


class StaticView(_BaseView):
    """View with no data of its own (movements, reports, settings)."""

    def __init__(self, name: str, output: Output = print) -> None:
        super().__init__(output)
        self.name = name

    def refresh(self) -> None:
        logger.info("view %s shown (no content in the command line front end)", self.name)
