from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Import progress display with tqdm (TTY only).

In non-TTY environments (CI, redirected output) no bar is drawn; the
position is still tracked so callers and logs can report ``current / total``.
"""

__all__ = [
    "ImportProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True when stdout is a terminal and a bar should be drawn."""
    return sys.stdout.isatty()


class ImportProgress:
    """Per-product progress for one import batch."""

    def __init__(self, total: int, *, description: str = "Importing products") -> None:
        self.total = total
        self.description = description
        self.current = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit="product",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    @property
    def text(self) -> str:
        return f"{self.current} / {self.total}"

    @property
    def percent(self) -> int:
        if not self.total:
            return 0
        return round(self.current / self.total * 100)

    def advance(self, reference: str = "") -> None:
        """Move to the next product (called before it is processed)."""
        self.current += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            if reference:
                self.pbar.set_description(f"{self.description} ({reference})")

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ImportProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
