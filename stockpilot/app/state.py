from __future__ import annotations

from dataclasses import dataclass

VIEW_NAMES = ("dashboard", "products", "movements", "reports", "settings")


@dataclass(frozen=True)
class ViewHeader:
    eyebrow: str
    title: str
    subtitle: str


HEADERS: dict[str, ViewHeader] = {
    "dashboard": ViewHeader(
        "Overview",
        "Dashboard",
        "Follow your products, alerts and stock movements.",
    ),
    "products": ViewHeader(
        "Catalog",
        "Product management",
        "Manage your references, suppliers and stock levels.",
    ),
    "movements": ViewHeader(
        "Stock flows",
        "Movement history",
        "Review recent stock entries, exits and adjustments.",
    ),
    "reports": ViewHeader(
        "Steering",
        "Reports & documents",
        "Export your data and reach shared resources.",
    ),
    "settings": ViewHeader(
        "Automations",
        "Administration shortcuts",
        "Turn on the key StockPilot features.",
    ),
}


@dataclass
class AppState:
    """Mutable UI state owned by the controller."""
    current_view: str = "dashboard"
    initialized: bool = False
