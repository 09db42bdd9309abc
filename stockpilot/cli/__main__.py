from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from stockpilot.app.controller import StockPilotApp
from stockpilot.app.state import VIEW_NAMES
from stockpilot.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from stockpilot.logging.init import set_debug, setup_logging
from stockpilot.parsing.csv_parser import ImportFileError
from stockpilot.services.prompts import AutoConfirmPrompter, ConsolePrompter
from stockpilot.store import StoreError, open_store

"""CLI entrypoint.

    stockpilot [--debug] [--config PATH] import FILE [--yes] [--view NAME]
    stockpilot [--debug] [--config PATH] view NAME

Exit codes: 0 success (also: nothing to import, import declined),
2 import completed with per-product errors or was cancelled, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so its values win over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="stockpilot", description="StockPilot CSV product import")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import products from a CSV file")
    imp.add_argument("file", type=Path, help="CSV file to import")
    imp.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    imp.add_argument("--view", choices=VIEW_NAMES, default=None, help="View shown while importing")

    view = sub.add_parser("view", help="Show one view")
    view.add_argument("name", choices=VIEW_NAMES)
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] from tests must not pick up pytest's argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)

    prompter = AutoConfirmPrompter() if getattr(args, "yes", False) else ConsolePrompter()

    try:
        with open_store(cfg) as store:
            logger.debug(f"store={cfg.store.backend} timeout={cfg.store.timeout_seconds}s")
            app = StockPilotApp(cfg, store, prompter)

            if args.command == "view":
                app.init(view=args.name)
                return EXIT_SUCCESS_ALL

            if args.view:
                app.init(view=args.view)
            try:
                result = app.import_csv(args.file)
            except ImportFileError as e:
                logger.error(f"import: {e}")
                return EXIT_FATAL
            except Exception as e:
                prompter.notify(f"Error while importing the CSV file: {e}")
                logger.error(f"import: unexpected error: {e}")
                return EXIT_FATAL
    except StoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL

    if result is None or result.declined:
        return EXIT_SUCCESS_ALL
    if result.errors > 0 or result.cancelled:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
