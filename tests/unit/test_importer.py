from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from stockpilot.logging.error_log import ErrorLogBuffer
from stockpilot.models.config_models import ImportOptions
from stockpilot.models.import_result import ImportState
from stockpilot.parsing.csv_parser import FileReadError, InvalidFileError
from stockpilot.services.importer import NO_PRODUCTS_NOTICE, ImportDriver, import_file
from stockpilot.services.prompts import AutoConfirmPrompter
from stockpilot.store.base import StoreError
from stockpilot.store.memory import InMemoryProductStore


class DecliningPrompter:
    def __init__(self) -> None:
        self.notices: list[str] = []

    def confirm(self, message: str) -> bool:
        return False

    def notify(self, message: str) -> None:
        self.notices.append(message)


class RecordingPrompter(AutoConfirmPrompter):
    def __init__(self) -> None:
        super().__init__(output_func=lambda m: None)
        self.notices: list[str] = []

    def notify(self, message: str) -> None:
        self.notices.append(message)


def _options(**overrides) -> ImportOptions:
    values = dict(extension=".csv", encoding="utf-8", delimiter=",", invalid_numbers="nan", logs_directory="logs")
    values.update(overrides)
    return ImportOptions(**values)


@pytest.fixture()
def error_log(tmp_path: Path) -> ErrorLogBuffer:
    return ErrorLogBuffer(tmp_path / "logs")


def test_driver_inserts_and_updates(catalog_store, error_log):
    prompter = RecordingPrompter()
    driver = ImportDriver(catalog_store, prompter, error_log=error_log)

    result = driver.run([{"reference": "A1", "stock_actuel": 9}, {"reference": "N1"}], file_name="p.csv")

    assert result.state is ImportState.COMPLETED
    assert driver.state is ImportState.COMPLETED
    assert (result.success, result.errors) == (2, 0)
    catalog = catalog_store.get_products()
    assert len(catalog) == 3
    a1 = next(p for p in catalog if p["reference"] == "A1")
    assert a1["id"] == 1 and a1["stock_actuel"] == 9
    assert "2 product(s) imported" in prompter.notices[-1]
    assert "error" not in prompter.notices[-1]
    assert "2 product(s)" in prompter.confirmations[0]


def test_driver_declined_has_no_side_effects(error_log):
    store = MagicMock()
    prompter = DecliningPrompter()
    driver = ImportDriver(store, prompter, error_log=error_log)

    result = driver.run([{"reference": "A1"}], file_name="p.csv")

    assert result.state is ImportState.IDLE
    assert result.declined
    assert driver.state is ImportState.IDLE
    store.get_products.assert_not_called()
    store.save_product.assert_not_called()
    assert prompter.notices == []


def test_driver_every_write_fails(error_log):
    store = MagicMock()
    store.get_products.return_value = []
    store.save_product.side_effect = StoreError("connection refused")
    prompter = RecordingPrompter()
    records = [{"reference": f"R{i}"} for i in range(4)]

    result = ImportDriver(store, prompter, error_log=error_log).run(records, file_name="p.csv")

    assert result.state is ImportState.COMPLETED
    assert (result.success, result.errors) == (0, 4)
    assert store.save_product.call_count == 4
    assert "4 error(s)" in prompter.notices[-1]
    lines = error_log.file_path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["reference"] for line in lines] == ["R0", "R1", "R2", "R3"]
    assert {json.loads(line)["error_type"] for line in lines} == {"STORE_ERROR"}


def test_driver_catalog_read_failure_counts_as_error(error_log):
    store = MagicMock()
    store.get_products.side_effect = [RuntimeError("boom"), [], []]
    store.save_product.side_effect = lambda r: {**r, "id": 5}

    result = ImportDriver(store, RecordingPrompter(), error_log=error_log).run(
        [{"reference": "A"}, {"reference": "B"}, {"reference": "C"}]
    )

    assert (result.success, result.errors) == (2, 1)
    saved = [c.args[0]["reference"] for c in store.save_product.call_args_list]
    assert saved == ["B", "C"]


def test_driver_tally_resets_between_batches(catalog_store, error_log):
    driver = ImportDriver(catalog_store, RecordingPrompter(), error_log=error_log)
    driver.run([{"reference": "A1"}])
    result = driver.run([{"reference": "Q1"}])
    assert (result.success, result.errors) == (1, 0)


def test_driver_progress_is_monotonic(catalog_store, error_log):
    seen: list[str] = []
    progress = MagicMock()
    progress.__enter__.return_value = progress

    def advance(reference=""):
        seen.append(reference)
        progress.text = f"{len(seen)} / 3"

    progress.advance.side_effect = advance
    driver = ImportDriver(
        catalog_store, RecordingPrompter(), error_log=error_log, progress_factory=lambda total: progress
    )

    driver.run([{"reference": "X"}, {"reference": "Y"}, {"reference": "Z"}])

    assert seen == ["X", "Y", "Z"]
    progress.__exit__.assert_called_once()


def test_driver_keyboard_interrupt_completes(error_log):
    store = MagicMock()
    store.get_products.return_value = []
    store.save_product.side_effect = [{"id": 1}, KeyboardInterrupt()]

    result = ImportDriver(store, RecordingPrompter(), error_log=error_log).run(
        [{"reference": "A"}, {"reference": "B"}, {"reference": "C"}]
    )

    assert result.state is ImportState.COMPLETED
    assert result.cancelled
    assert (result.success, result.errors) == (1, 0)
    assert store.save_product.call_count == 2


def test_driver_rejects_empty_batch(error_log):
    with pytest.raises(ValueError):
        ImportDriver(MagicMock(), RecordingPrompter(), error_log=error_log).run([])


def test_driver_per_batch_policy_avoids_duplicates(error_log):
    store = InMemoryProductStore()
    driver = ImportDriver(store, RecordingPrompter(), catalog_refresh="per_batch", error_log=error_log)

    result = driver.run([{"reference": "D1", "stock_actuel": 1}, {"reference": "D1", "stock_actuel": 2}])

    assert result.success == 2
    assert store.read_count == 1
    assert store.get_products() == [{"reference": "D1", "stock_actuel": 2, "id": 1}]


def test_driver_logs_summary(catalog_store, error_log):
    with patch("stockpilot.services.importer.log_summary") as mock_summary:
        ImportDriver(catalog_store, RecordingPrompter(), error_log=error_log).run(
            [{"reference": "A1"}], file_name="p.csv", skipped_rows=2
        )
    line = mock_summary.call_args.args[0]
    assert line.startswith("file=p.csv products=1 success=1 errors=0 skipped_rows=2 elapsed_sec=")


def test_import_file_end_to_end(products_csv: Path, catalog_store, error_log):
    prompter = RecordingPrompter()
    result = import_file(products_csv, catalog_store, prompter, _options(), error_log=error_log)

    assert result is not None
    assert (result.total_records, result.success, result.errors) == (3, 3, 0)
    refs = sorted(p["reference"] for p in catalog_store.get_products())
    assert refs == ["A1", "B2", "C3", "Z9"]


def test_import_file_no_products(temp_workdir: Path, error_log):
    f = temp_workdir / "empty.csv"
    f.write_text("Référence,Désignation\n", encoding="utf-8")
    store = MagicMock()
    prompter = RecordingPrompter()

    assert import_file(f, store, prompter, _options(), error_log=error_log) is None
    assert prompter.notices == [NO_PRODUCTS_NOTICE]
    assert prompter.confirmations == []
    store.save_product.assert_not_called()


def test_import_file_records_skipped_rows(temp_workdir: Path, error_log):
    f = temp_workdir / "p.csv"
    f.write_text("Référence,Stock actuel\nA1,1\nA2\n,3\n", encoding="utf-8")

    result = import_file(f, InMemoryProductStore(), RecordingPrompter(), _options(), error_log=error_log)

    assert result.skipped_rows == 2
    entries = [json.loads(x) for x in error_log.file_path.read_text(encoding="utf-8").splitlines()]
    assert [(e["line"], e["error_type"]) for e in entries] == [
        (3, "COLUMN_COUNT_MISMATCH"),
        (4, "MISSING_REFERENCE"),
    ]


def test_import_file_rejects_extension(temp_workdir: Path, error_log):
    f = temp_workdir / "p.txt"
    f.write_text("Référence\nA1\n", encoding="utf-8")
    store = MagicMock()
    with pytest.raises(InvalidFileError):
        import_file(f, store, RecordingPrompter(), _options(), error_log=error_log)
    store.get_products.assert_not_called()


def test_import_file_read_failure(temp_workdir: Path, error_log):
    with pytest.raises(FileReadError):
        import_file(temp_workdir / "nope.csv", MagicMock(), RecordingPrompter(), _options(), error_log=error_log)


@pytest.fixture()
def unwritable_log(temp_workdir: Path) -> ErrorLogBuffer:
    blocker = temp_workdir / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    return ErrorLogBuffer(blocker / "logs")


def test_import_file_completes_when_error_log_cannot_be_written(temp_workdir: Path, unwritable_log):
    f = temp_workdir / "p.csv"
    f.write_text("Référence,Stock actuel\nA1,1\nA2\n", encoding="utf-8")
    store = InMemoryProductStore()
    prompter = RecordingPrompter()

    result = import_file(f, store, prompter, _options(), error_log=unwritable_log)

    assert result.state is ImportState.COMPLETED
    assert (result.success, result.skipped_rows) == (1, 1)
    assert [p["reference"] for p in store.get_products()] == ["A1"]
    assert prompter.notices[-1].startswith("Import finished!")
    assert len(unwritable_log) == 1
    assert unwritable_log.try_flush() is None


def test_import_file_no_products_notice_when_error_log_cannot_be_written(temp_workdir: Path, unwritable_log):
    f = temp_workdir / "p.csv"
    f.write_text("Référence,Stock actuel\n,4\n", encoding="utf-8")
    prompter = RecordingPrompter()

    assert import_file(f, MagicMock(), prompter, _options(), error_log=unwritable_log) is None
    assert prompter.notices == [NO_PRODUCTS_NOTICE]
    assert len(unwritable_log) == 1
