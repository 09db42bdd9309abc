"""CSV parsing: line tokenizer, record mapper and whole-file parser."""

from .csv_parser import parse_csv, parse_csv_report  # noqa: F401
from .mapper import HEADER_MAP, map_record  # noqa: F401
from .tokenizer import tokenize_line  # noqa: F401
