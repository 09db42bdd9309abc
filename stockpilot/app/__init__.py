"""Application controller, view state and views."""

from .controller import StockPilotApp  # noqa: F401
from .state import AppState, VIEW_NAMES  # noqa: F401
