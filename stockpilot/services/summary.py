from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line and end-of-import notice rendering."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny durations
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line of one import.

    Format:
        SUMMARY file={name} products={n} success={s} errors={e}
        skipped_rows={k} elapsed_sec={t}

    >>> from datetime import datetime, timezone
    >>> from stockpilot.models.import_result import ImportState
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(ImportResult("p.csv", ImportState.COMPLETED, 3, 2, 1, 0, t, t, 2.0))
    'SUMMARY file=p.csv products=3 success=2 errors=1 skipped_rows=0 elapsed_sec=2'
    """
    line = (
        f"SUMMARY file={result.file_name} "
        f"products={result.total_records} "
        f"success={result.success} "
        f"errors={result.errors} "
        f"skipped_rows={result.skipped_rows} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )
    if result.cancelled:
        line += " cancelled=1"
    return line


def render_completion_notice(result: ImportResult) -> str:
    lines = ["Import finished!", f"  {result.success} product(s) imported"]
    if result.errors > 0:
        lines.append(f"  {result.errors} error(s)")
    if result.cancelled:
        lines.append(f"  cancelled after {result.success + result.errors} of {result.total_records}")
    return "\n".join(lines)


def render_confirmation(count: int) -> str:
    return (
        f"You are about to import {count} product(s).\n\n"
        "Existing products (same reference) will be updated.\n"
        "New products will be added."
    )
