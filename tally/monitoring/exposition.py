# exposition.py - Prometheus Text Exposition
# ============================================================================
# FILE: tally/monitoring/exposition.py
# Renders a metrics record (dataclass or plain object) as Prometheus text
# ============================================================================

import dataclasses
from typing import Any, Iterable, Iterator, Protocol, Tuple, runtime_checkable

from ..core.formatting import counter_block


@runtime_checkable
class Renderable(Protocol):
    """Anything that can render itself as a Prometheus text block."""

    def render(self, name: str, help_text: str) -> str:
        ...


def render_structure(record: Any, skip: Iterable[str] = ()) -> str:
    """
    Render every field of `record` in Prometheus text format.

    For dataclasses the exposed name and help text come from field metadata:

        @dataclass
        class ApiStats:
            hits: int = field(default=0, metadata={"name": "api_hits", "help": "Total API calls"})
            latency: Histogram = field(default_factory=..., metadata={"help": "API latency"})

    Plain objects are walked through their instance attributes with empty
    help text. Fields whose value is Renderable (e.g. Histogram) render
    themselves; everything else is emitted as a counter.

    Args:
        record: The metrics record to render
        skip: Attribute names to leave out
    """
    skip_set = set(skip)
    lines = []

    for attr, name, help_text in _fields(record):
        if attr in skip_set:
            continue

        value = getattr(record, attr)
        if isinstance(value, Renderable):
            lines.append(value.render(name, help_text))
        else:
            lines.append(counter_block(name, help_text, value))

    return "".join(lines)


def _fields(record: Any) -> Iterator[Tuple[str, str, str]]:
    """Yield (attribute, exposed name, help text) for each field of `record`."""
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        for f in dataclasses.fields(record):
            yield f.name, f.metadata.get("name", f.name), f.metadata.get("help", "")
        return

    try:
        attrs = vars(record)
    except TypeError:
        raise TypeError(f"cannot render {type(record).__name__}: no fields to walk") from None

    for attr in attrs:
        if attr.startswith("_"):
            continue
        yield attr, attr, ""
