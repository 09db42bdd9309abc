from __future__ import annotations

import logging
from pathlib import Path

from ..models.parse_result import (
    COLUMN_COUNT_MISMATCH,
    INVALID_NUMBER,
    MISSING_REFERENCE,
    ParseResult,
    ProductRecord,
    SkippedRow,
)
from .mapper import InvalidNumberError, map_record
from .tokenizer import tokenize_line

"""CSV file reading and parsing.

The first non-blank line is the header. Data lines whose field count differs
from the header, or that carry no reference, are dropped and reported as
``SkippedRow`` diagnostics; parsing itself never fails on malformed input.
"""

logger = logging.getLogger(__name__)


class ImportFileError(Exception):
    """Base exception for files that cannot be imported at all."""


class InvalidFileError(ImportFileError):
    """The selected file does not have the accepted extension."""


class FileReadError(ImportFileError):
    """The file could not be read or decoded."""


def check_extension(path: Path, extension: str = ".csv") -> None:
    """Accept a file by name only (no content sniffing).

    Raises:
        InvalidFileError: when the file name does not end with ``extension``
    """
    if not path.name.endswith(extension):
        raise InvalidFileError(f"not a {extension} file: {path.name}")


def read_csv_file(path: Path, encoding: str = "utf-8") -> str:
    """Read the whole file as text.

    A UTF-8 byte order mark is dropped so it does not end up in the first
    header name.

    Raises:
        FileReadError: on OS errors or undecodable content
    """
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise FileReadError(f"error reading {path.name}: {e}") from e


def parse_csv_report(
    text: str,
    *,
    delimiter: str = ",",
    invalid_numbers: str = "nan",
) -> ParseResult:
    """Parse a whole CSV body into records plus skipped-row diagnostics."""
    lines = [line for line in text.split("\n") if line.strip()]

    if len(lines) < 2:
        return ParseResult()

    headers = [h.strip() for h in tokenize_line(lines[0], delimiter)]

    records: list[ProductRecord] = []
    skipped: list[SkippedRow] = []

    for index, line in enumerate(lines[1:], start=2):
        values = tokenize_line(line, delimiter)

        if len(values) != len(headers):
            logger.warning(
                "line %d skipped (column count %d, expected %d)", index, len(values), len(headers)
            )
            skipped.append(
                SkippedRow(index, COLUMN_COUNT_MISMATCH, f"{len(values)} fields, expected {len(headers)}")
            )
            continue

        try:
            record, has_reference = map_record(headers, values, invalid_numbers)
        except InvalidNumberError as e:
            logger.warning("line %d skipped (%s)", index, e)
            skipped.append(SkippedRow(index, INVALID_NUMBER, str(e)))
            continue

        if not (has_reference and record.get("reference")):
            logger.debug("line %d skipped (no reference)", index)
            skipped.append(SkippedRow(index, MISSING_REFERENCE))
            continue

        records.append(record)

    logger.debug("parsed %d record(s), skipped %d line(s)", len(records), len(skipped))
    return ParseResult(records=records, skipped=skipped, header=headers)


def parse_csv(text: str, *, delimiter: str = ",", invalid_numbers: str = "nan") -> list[ProductRecord]:
    """Parse a whole CSV body; returns the valid records in file order."""
    return parse_csv_report(text, delimiter=delimiter, invalid_numbers=invalid_numbers).records
