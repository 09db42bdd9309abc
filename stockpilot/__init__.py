"""StockPilot: CSV product import for the StockPilot inventory catalog."""

__version__ = "0.3.0"
