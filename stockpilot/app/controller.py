from __future__ import annotations

import logging
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.import_result import ImportResult, ImportState
from ..parsing.csv_parser import ImportFileError, InvalidFileError
from ..services.importer import import_file
from ..services.prompts import Prompter
from ..store.base import ProductStore
from .state import HEADERS, VIEW_NAMES, AppState
from .views import DashboardView, Output, ProductsView, StaticView, View

logger = logging.getLogger(__name__)


class StockPilotApp:
    """Top-level controller: owns the view state and starts CSV imports."""

    def __init__(
        self,
        cfg: AppConfig,
        store: ProductStore,
        prompter: Prompter,
        output: Output = print,
    ) -> None:
        self.cfg = cfg
        self.store = store
        self.prompter = prompter
        self._output = output
        self.state = AppState(current_view=cfg.default_view)
        self.views: dict[str, View] = {
            "dashboard": DashboardView(store, output),
            "products": ProductsView(store, output),
            "movements": StaticView("movements", output),
            "reports": StaticView("reports", output),
            "settings": StaticView("settings", output),
        }

    def init(self, view: str | None = None) -> None:
        if self.state.initialized:
            logger.debug("already initialized")
            return
        self.switch_view(view or self.state.current_view)
        self.state.initialized = True

    def switch_view(self, name: str) -> bool:
        if name not in VIEW_NAMES:
            logger.warning("unknown view: %s", name)
            return False
        logger.debug("switching view: %s -> %s", self.state.current_view, name)
        header = HEADERS[name]
        self._output(f"[{header.eyebrow}] {header.title}")
        self._output(header.subtitle)
        self.state.current_view = name
        self._show(self.views[name])
        return True

    def _show(self, view: View) -> None:
        # a view failing to render must not take the application down
        try:
            if view.is_initialized:
                view.refresh()
            else:
                view.init()
        except Exception as e:
            logger.error("view %s failed: %s", view.name, e)

    def import_csv(self, path: Path, error_log: ErrorLogBuffer | None = None) -> ImportResult | None:
        """Import one CSV file; refreshes the products view when it is shown.

        Raises:
            ImportFileError: the file was rejected or could not be read
        """
        try:
            result = import_file(
                path,
                self.store,
                self.prompter,
                self.cfg.import_options,
                catalog_refresh=self.cfg.store.catalog_refresh,
                error_log=error_log,
            )
        except InvalidFileError:
            self.prompter.notify("Please select a valid CSV file")
            raise
        except ImportFileError as e:
            self.prompter.notify(f"Error while importing the CSV file: {e}")
            raise

        if result is not None and result.state is ImportState.COMPLETED and self.state.current_view == "products":
            self._show(self.views["products"])
        return result

    def destroy(self) -> None:
        self.state.initialized = False
        logger.debug("application state cleared")
