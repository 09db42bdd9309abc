"""Domain models for the StockPilot CSV import."""

from .config_models import ApiConfig, AppConfig, DatabaseConfig, ImportOptions, StoreConfig
from .error_record import ErrorRecord
from .import_result import ImportResult, ImportState, ImportTally
from .parse_result import ParseResult, ProductRecord, SkippedRow

__all__ = [
    # Configuration models
    "ApiConfig",
    "AppConfig",
    "DatabaseConfig",
    "ImportOptions",
    "StoreConfig",
    # Processing models
    "ErrorRecord",
    "ImportResult",
    "ImportState",
    "ImportTally",
    "ParseResult",
    "ProductRecord",
    "SkippedRow",
]
