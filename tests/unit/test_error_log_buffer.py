from __future__ import annotations

import json
from pathlib import Path

from stockpilot.logging.error_log import ErrorLogBuffer, ErrorRecord
from stockpilot.logging.init import setup_logging

KEYS = {"timestamp", "file", "line", "reference", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="products.csv",
        line=12,
        reference="A1",
        error_type="STORE_ERROR",
        message="duplicate key",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "products.csv"
    assert data["line"] == 12
    assert data["reference"] == "A1"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_error_record_keeps_accents():
    rec = ErrorRecord.create("f.csv", -1, "É1", "STORE_ERROR", "échec")
    assert "échec" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("p.csv", 3, "", "COLUMN_COUNT_MISMATCH", "2 fields, expected 3"))
    buf.append(ErrorRecord.create("p.csv", -1, "A1", "STORE_ERROR", "timeout"))
    path = buf.flush()
    assert path.exists()
    assert path.parent == Path("./logs")
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create("f.csv", 1, "A", "STORE_ERROR", "x"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.csv", 2, "B", "STORE_ERROR", "y"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_try_flush_keeps_records_on_write_failure(tmp_path: Path, capsys):
    setup_logging()
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    buf = ErrorLogBuffer(blocker / "logs")
    buf.append(ErrorRecord.create("f.csv", 2, "A", "STORE_ERROR", "x"))

    assert buf.try_flush() is None
    assert len(buf) == 1
    assert buf.written == 0
    assert "WARN could not write error log" in capsys.readouterr().out
