from __future__ import annotations

import re

"""Line tokenizer.

A double quote toggles the "inside quotes" flag and is dropped; the
delimiter splits fields only outside quotes. Doubled quotes are not treated
as an escape.
"""

_QUOTED = re.compile(r'^"(.*)"$', re.DOTALL)


def strip_quotes(value: str) -> str:
    """Remove one layer of surrounding double quotes."""
    return _QUOTED.sub(r"\1", value)


def tokenize_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line into field values.

    >>> tokenize_line('"Acme, Inc.",5')
    ['Acme, Inc.', '5']
    >>> tokenize_line('')
    ['']
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(char)

    values.append("".join(current))

    return [strip_quotes(v) for v in values]
