# formatting.py - Text Formatting Helpers
# ============================================================================
# FILE: tally/core/formatting.py
# Prometheus exposition lines and fixed-column value blocks
# ============================================================================

from typing import List, Sequence


def help_line(name: str, help_text: str) -> str:
    return f"# HELP {name} {help_text}\n"


def type_line(name: str, metric_type: str) -> str:
    return f"# TYPE {name} {metric_type}\n"


def sample_line(name: str, value, labels: str = "") -> str:
    """One `<name>{labels} <value>` sample line."""
    return f"{name}{labels} {value}\n"


def counter_block(name: str, help_text: str, value) -> str:
    """HELP/TYPE/sample block for a plain counter field."""
    if isinstance(value, bool):
        value = int(value)
    return help_line(name, help_text) + type_line(name, "counter") + sample_line(name, value)


def format_columns(values: Sequence[int], columns: int = 4) -> str:
    """
    Lay values out `columns` per line, right-aligned to a common width.

    Returns an empty string for an empty sequence.
    """
    if columns < 1:
        raise ValueError(f"columns must be >= 1, got {columns}")
    if not values:
        return ""

    cells = [str(v) for v in values]
    width = max(len(c) for c in cells)

    rows: List[str] = []
    for i in range(0, len(cells), columns):
        rows.append(" ".join(c.rjust(width) for c in cells[i:i + columns]))
    return "\n".join(rows)
