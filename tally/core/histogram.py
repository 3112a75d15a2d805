# histogram.py - Exponential Histogram
# ============================================================================
# FILE: tally/core/histogram.py
# Bucketed histogram with a concurrent observe path and Prometheus output
# ============================================================================

import threading
import logging
from typing import List, Tuple

from .bucketing import Bucketing, ExponentialBucket, Number
from .formatting import help_line, type_line, sample_line

logger = logging.getLogger(__name__)


class _AtomicCounter:
    """Integer counter whose increments are atomic with respect to each other."""

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def add(self, n: int = 1) -> None:
        with self._lock:
            self._value += n

    @property
    def value(self) -> int:
        return self._value


class Histogram:
    """
    Fixed-resolution histogram built once from a bucketing policy.

    Thread-safe for many concurrent writers. Each observation updates
    three counters (the bin, `count` and `sum`); every update is atomic on
    its own, but the three are not applied as a unit. A reader racing with
    writers may therefore see `sum`/`count` a step or two apart from the
    bin snapshot. This relaxed consistency keeps `observe` cheap and is
    expected behaviour, not corruption: no counter is ever torn or lost.

    Buckets are never resized or reset.
    """

    def __init__(self, bucketing: Bucketing):
        self._bucketing = bucketing
        self._upper_limits: Tuple[int, ...] = tuple(bucketing.upper_bounds())
        self._bins = [_AtomicCounter() for _ in self._upper_limits]
        self._count = _AtomicCounter()
        self._sum = _AtomicCounter()

        logger.debug(f"Created histogram with {len(self._bins)} buckets ({bucketing!r})")

    @classmethod
    def exponential(cls, start: Number, step: Number, count: int) -> "Histogram":
        """Build a histogram over ExponentialBucket(start, step, count)."""
        return cls(ExponentialBucket(start, step, count))

    @property
    def upper_limits(self) -> Tuple[int, ...]:
        return self._upper_limits

    @property
    def count(self) -> int:
        """Total number of observations."""
        return self._count.value

    @property
    def sum(self) -> int:
        """Total of all observed values."""
        return self._sum.value

    def __len__(self) -> int:
        return len(self._bins)

    def observe(self, value: int):
        """Record one observation. Values past the last bound land in the last bucket."""
        bin_index = self._bucketing.bucket_index_for(value)
        if bin_index >= len(self._bins):
            bin_index = len(self._bins) - 1

        self._bins[bin_index].add(1)
        self._count.add(1)
        self._sum.add(value)

    def snapshot(self) -> List[int]:
        """Current bin counts. Bins are read one at a time, not as a unit."""
        return [b.value for b in self._bins]

    def format_bins(self, delimiter: str = " ") -> str:
        """Bin counts joined by `delimiter`, e.g. "3,0,1" for delimiter=","."""
        return delimiter.join(str(v) for v in self.snapshot())

    def render(self, name: str, help_text: str) -> str:
        """
        Render the histogram in Prometheus text exposition format.

        Args:
            name: Metric name
            help_text: Text for the HELP line

        Returns:
            HELP and TYPE lines, one `<name>_latency_bucket{le="..."}` line per
            bucket in ascending bound order, then `<name>_sum` and `<name>_count`.
        """
        lines = [help_line(name, help_text), type_line(name, "histogram")]
        for upper_limit, value in zip(self._upper_limits, self.snapshot()):
            lines.append(sample_line(f"{name}_latency_bucket", value, f'{{le="{upper_limit}"}}'))
        lines.append(sample_line(f"{name}_sum", self.sum))
        lines.append(sample_line(f"{name}_count", self.count))
        return "".join(lines)

    def __repr__(self) -> str:
        return f"Histogram(buckets={len(self._bins)}, count={self.count})"
