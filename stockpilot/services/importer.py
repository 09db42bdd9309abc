from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..logging.init import log_summary
from ..models.config_models import ImportOptions
from ..models.import_result import ImportResult, ImportState, ImportTally
from ..models.parse_result import ProductRecord
from ..parsing.csv_parser import check_extension, parse_csv_report, read_csv_file
from ..store.base import ProductStore, StoreError
from .progress import ImportProgress
from .prompts import Prompter
from .reconcile import PER_RECORD, CatalogSource, reconcile
from .summary import render_completion_notice, render_confirmation, render_summary_line

"""Batch import driver.

Records are processed strictly one after another, in file order: reconcile
against the catalog, then save. A failing record is counted and logged and
the next one is attempted; once confirmed, a batch always completes.
"""

logger = logging.getLogger(__name__)

NO_PRODUCTS_NOTICE = "No products found in the CSV file"


class ImportDriver:
    """Runs one confirmed batch of product records against a store.

    State: idle → confirming → running → completed; a declined confirmation
    goes back to idle without touching the store.
    """

    def __init__(
        self,
        store: ProductStore,
        prompter: Prompter,
        *,
        catalog_refresh: str = PER_RECORD,
        error_log: ErrorLogBuffer | None = None,
        progress_factory: Callable[[int], ImportProgress] = ImportProgress,
    ) -> None:
        self.store = store
        self.prompter = prompter
        self.catalog_refresh = catalog_refresh
        self.error_log = error_log if error_log is not None else ErrorLogBuffer()
        self._progress_factory = progress_factory
        self.state = ImportState.IDLE
        self.tally = ImportTally()

    def run(
        self,
        records: list[ProductRecord],
        file_name: str = "",
        skipped_rows: int = 0,
    ) -> ImportResult:
        if not records:
            raise ValueError("no records to import")

        start_time = datetime.now(UTC)
        self.tally.reset()

        self.state = ImportState.CONFIRMING
        if not self.prompter.confirm(render_confirmation(len(records))):
            logger.info("import declined: %s (%d product(s))", file_name, len(records))
            self.state = ImportState.IDLE
            return self._result(file_name, records, skipped_rows, start_time)

        self.state = ImportState.RUNNING
        logger.info("importing %d product(s) from %s", len(records), file_name)
        cancelled = self._run_batch(records, file_name)

        self.state = ImportState.COMPLETED
        self.error_log.try_flush()

        result = self._result(file_name, records, skipped_rows, start_time, cancelled=cancelled)
        self.prompter.notify(render_completion_notice(result))
        # log_summary adds the "SUMMARY " prefix itself
        log_summary(render_summary_line(result)[len("SUMMARY "):])
        return result

    def _run_batch(self, records: list[ProductRecord], file_name: str) -> bool:
        """Process every record; returns True when interrupted by the user."""
        catalog = CatalogSource(self.store, self.catalog_refresh)

        with self._progress_factory(len(records)) as progress:
            try:
                for record in records:
                    reference = str(record.get("reference", ""))
                    progress.advance(reference)
                    logger.debug("product %s reference=%s", progress.text, reference)
                    try:
                        decision = reconcile(record, catalog.current())
                        saved = self.store.save_product(record)
                    except Exception as e:
                        self.tally.errors += 1
                        logger.error("import failed reference=%s: %s", reference, e)
                        self.error_log.append(
                            ErrorRecord.create(
                                file=file_name,
                                line=-1,
                                reference=reference,
                                error_type="STORE_ERROR" if isinstance(e, StoreError) else "UNEXPECTED_ERROR",
                                message=str(e),
                            )
                        )
                    else:
                        self.tally.success += 1
                        catalog.remember(saved)
                        logger.debug("reference=%s %s id=%s", reference, decision.value, saved.get("id"))
                    progress.set_postfix(success=self.tally.success, errors=self.tally.errors)
            except KeyboardInterrupt:
                logger.warning(
                    "import cancelled after %d of %d product(s)", self.tally.processed, len(records)
                )
                return True
        return False

    def _result(
        self,
        file_name: str,
        records: list[ProductRecord],
        skipped_rows: int,
        start_time: datetime,
        cancelled: bool = False,
    ) -> ImportResult:
        end_time = datetime.now(UTC)
        return ImportResult(
            file_name=file_name,
            state=self.state,
            total_records=len(records),
            success=self.tally.success,
            errors=self.tally.errors,
            skipped_rows=skipped_rows,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            cancelled=cancelled,
        )


def import_file(
    path: Path,
    store: ProductStore,
    prompter: Prompter,
    options: ImportOptions,
    *,
    catalog_refresh: str = PER_RECORD,
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult | None:
    """Check, read and parse a CSV file, then run the batch.

    Returns None when the file holds no importable product.

    Raises:
        InvalidFileError: wrong extension (nothing is read)
        FileReadError: the file cannot be read or decoded
    """
    check_extension(path, options.extension)
    logger.info("reading %s", path.name)
    text = read_csv_file(path, options.encoding)

    report = parse_csv_report(text, delimiter=options.delimiter, invalid_numbers=options.invalid_numbers)

    if error_log is None:
        error_log = ErrorLogBuffer(Path(options.logs_directory))
    for row in report.skipped:
        error_log.append(ErrorRecord.create(path.name, row.line, "", row.reason, row.detail))

    if not report.records:
        logger.info("no products found in %s", path.name)
        prompter.notify(NO_PRODUCTS_NOTICE)
        error_log.try_flush()
        return None

    driver = ImportDriver(
        store,
        prompter,
        catalog_refresh=catalog_refresh,
        error_log=error_log,
    )
    result = driver.run(report.records, file_name=path.name, skipped_rows=len(report.skipped))
    # declined batches still keep their parse diagnostics
    error_log.try_flush()
    return result
