from __future__ import annotations

import math
import re
from typing import Any

from ..models.parse_result import ProductRecord
from .tokenizer import strip_quotes

"""Record mapper: header row + value row -> ProductRecord.

Display headers come from the catalog export (French locale). Headers not in
``HEADER_MAP`` are lower-cased with spaces replaced by underscores.

Numeric columns accept the longest leading number of the cell, so
``"12 €"`` reads as 12 and ``"abc"`` is not a number. What happens to a cell
that is not a number depends on the ``invalid_numbers`` policy:

- ``nan``: keep ``float("nan")`` in the record
- ``zero``: use 0
- ``reject``: raise InvalidNumberError so the row is dropped
"""

__all__ = [
    "HEADER_MAP",
    "DECIMAL_FIELDS",
    "INTEGER_FIELDS",
    "InvalidNumberError",
    "field_key",
    "parse_decimal",
    "parse_integer",
    "map_record",
]

HEADER_MAP: dict[str, str] = {
    "ID": "id",
    "Référence": "reference",
    "Désignation": "designation",
    "Catégorie": "categorie",
    "Fournisseur": "fournisseur",
    "Prix achat": "prix_achat",
    "Prix vente": "prix_vente",
    "Stock actuel": "stock_actuel",
    "Stock minimum": "stock_minimum",
    "Stock maximum": "stock_maximum",
    "Emplacement": "emplacement",
    "Date entrée": "date_entree",
    "Notes": "notes",
}

DECIMAL_FIELDS = frozenset({"prix_achat", "prix_vente"})
INTEGER_FIELDS = frozenset({"stock_actuel", "stock_minimum", "stock_maximum"})

_DECIMAL_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PREFIX = re.compile(r"^\s*[+-]?\d+")


class InvalidNumberError(ValueError):
    """A numeric column holds something that is not a number."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field}: not a number: {value!r}")
        self.field = field
        self.value = value


def field_key(header: str) -> str:
    return HEADER_MAP.get(header) or header.lower().replace(" ", "_")


def parse_decimal(value: str) -> float:
    """Parse a price; the first comma is the decimal separator."""
    m = _DECIMAL_PREFIX.match(value.replace(",", ".", 1))
    if m is None:
        return math.nan
    return float(m.group(0))


def parse_integer(value: str) -> int | float:
    """Parse a stock quantity; returns NaN when there is no leading integer."""
    m = _INTEGER_PREFIX.match(value)
    if m is None:
        return math.nan
    return int(m.group(0))


def _coerce(field: str, value: str, invalid_numbers: str) -> Any:
    if field in DECIMAL_FIELDS:
        number: Any = parse_decimal(value) if value else 0
    elif field in INTEGER_FIELDS:
        number = parse_integer(value) if value else 0
    else:
        return strip_quotes(value)

    if isinstance(number, float) and math.isnan(number):
        if invalid_numbers == "reject":
            raise InvalidNumberError(field, value)
        if invalid_numbers == "zero":
            return 0
    return number


def map_record(
    headers: list[str],
    values: list[str],
    invalid_numbers: str = "nan",
) -> tuple[ProductRecord, bool]:
    """Build a record from aligned header and value sequences.

    The caller guarantees ``len(headers) == len(values)``.

    Returns:
        (record, has_reference) where has_reference is True only when the
        ``reference`` field received a non-empty value.

    Raises:
        InvalidNumberError: only with ``invalid_numbers="reject"``.
    """
    record: ProductRecord = {}
    has_reference = False

    for header, raw in zip(headers, values, strict=True):
        field = field_key(header)
        value = raw.strip()

        if field == "reference" and value:
            has_reference = True

        record[field] = _coerce(field, value, invalid_numbers)

    return record, has_reference
