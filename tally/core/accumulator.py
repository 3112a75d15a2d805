# accumulator.py - Time-Windowed Accumulators
# ============================================================================
# FILE: tally/core/accumulator.py
# Ring buffer of per-interval (sum, updates) pairs with rolling snapshots
# ============================================================================

import threading
import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from ..errors import ConfigurationError, NoDataError
from .formatting import format_columns

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "{name}\n{values}\n"
DEFAULT_NO_DATA_FORMAT = "{name}: no data in the last {size} intervals\n"
_UINT64_MAX = 2**64 - 1


@dataclass
class WindowSnapshot:
    """Normalized view of the most recent closed intervals, oldest first."""
    results: List[int] = field(default_factory=list)
    nonzero: bool = False
    max: int = 0
    max_window: int = 0


class Accumulator:
    """
    Fixed-size ring buffer of intervals ("ticks").

    `add` accumulates into the open interval, `tick` closes it and opens
    the next one. Snapshots cover the last `size` closed intervals, so the
    ring holds `size + 1` slots: `size` closed intervals plus the open one.

    Not thread-safe: `add`, `tick` and `reset` must never run concurrently
    with each other or with a snapshot read. Use SynchronizedAccumulator
    when more than one thread touches the instance.
    """

    def __init__(self, size: int, name: str = ""):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ConfigurationError(f"accumulator size must be an integer >= 1, got {size!r}")

        self.name = name
        self.size = size
        # One extra slot holds the open interval next to `size` closed ones
        self._slots = size + 1
        self._sums = np.zeros(self._slots, dtype=np.uint64)
        self._counts = np.zeros(self._slots, dtype=np.uint64)
        self._cursor = 0
        self._ticks = 0

        logger.debug(f"Created accumulator '{name}' (size={size})")

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def ticks(self) -> int:
        """Ticks since construction or the last reset."""
        return self._ticks

    def add(self, value: int):
        """Add `value` to the open interval."""
        if value < 0:
            raise ValueError(f"accumulator values must be non-negative, got {value}")
        self._sums[self._cursor] += np.uint64(value)
        self._counts[self._cursor] += np.uint64(1)

    def tick(self):
        """Close the open interval and open the next slot, discarding its stale data."""
        cursor = (self._cursor + 1) % self._slots
        self._sums[cursor] = 0
        self._counts[cursor] = 0
        self._cursor = cursor
        self._ticks += 1

    def reset(self):
        """Zero every slot and rewind to the initial state."""
        self._sums[:] = 0
        self._counts[:] = 0
        self._cursor = 0
        self._ticks = 0
        logger.debug(f"Reset accumulator '{self.name}'")

    def peek_sum(self) -> int:
        """Sum of the most recently closed interval (0 before the first tick)."""
        return int(self._sums[self._previous()])

    def peek_average(self) -> int:
        """
        Average of the most recently closed interval.

        Raises:
            NoDataError: if that interval received no updates
        """
        previous = self._previous()
        updates = int(self._counts[previous])
        if updates == 0:
            raise NoDataError(f"accumulator '{self.name}': last interval has no updates")
        return int(self._sums[previous]) // updates

    def get_sum(self, divider: int = 1) -> WindowSnapshot:
        """Per-interval sums divided by `divider` (0 counts as 1)."""
        return self._snapshot(divider, average=False)

    def get_average(self, divider: int = 1) -> WindowSnapshot:
        """Per-interval averages divided by `divider` (0 counts as 1)."""
        return self._snapshot(divider, average=True)

    def render_text(
        self,
        fmt: str = DEFAULT_FORMAT,
        no_data_fmt: str = DEFAULT_NO_DATA_FORMAT,
        average: bool = False,
        divider: int = 1,
        columns: int = 4,
    ) -> str:
        """
        Format the sum (or average) snapshot as text.

        `fmt` may use {name}, {values}, {max} and {max_window}; {values} is a
        block of `columns` right-aligned values per line. When the window holds
        no updates at all, `no_data_fmt` is used with {name} and {size}.
        """
        snapshot = self._snapshot(divider, average=average)
        if not snapshot.nonzero:
            return no_data_fmt.format(name=self.name, size=self.size)
        return fmt.format(
            name=self.name,
            values=format_columns(snapshot.results, columns),
            max=snapshot.max,
            max_window=snapshot.max_window,
        )

    def _previous(self) -> int:
        return (self._cursor - 1) % self._slots

    def _snapshot(self, divider: int, average: bool) -> WindowSnapshot:
        if divider < 0 or divider > _UINT64_MAX:
            raise ValueError(f"divider must be in [0, 2**64), got {divider}")
        div = np.uint64(divider or 1)

        window = min(self.size, self._ticks)
        # Closed intervals, oldest first, ending just behind the cursor
        idx = (self._cursor - np.arange(window, 0, -1)) % self._slots
        sums = self._sums[idx]
        counts = self._counts[idx]
        updated = counts > 0

        if average:
            # (sum // updates) // divider == sum // (updates * divider), without
            # the product wrapping around in uint64
            per_update = sums // np.where(updated, counts, np.uint64(1))
            results = np.where(updated, per_update // div, np.uint64(0))
        else:
            results = np.where(updated, sums // div, np.uint64(0))

        if not updated.any():
            return WindowSnapshot(results=results.tolist())

        return WindowSnapshot(
            results=results.tolist(),
            nonzero=True,
            max=int(results[updated].max()),
            max_window=int(sums[updated].max()),
        )

    def __repr__(self) -> str:
        return f"Accumulator(name={self.name!r}, size={self.size}, ticks={self._ticks})"


class SynchronizedAccumulator:
    """
    Accumulator guarded by a single exclusive lock.

    Every mutating call and every snapshot read holds the lock for its
    duration. There is no reader/writer split: snapshot reads are rare next
    to `add`, so one plain lock is enough.
    """

    def __init__(self, size: int, name: str = ""):
        self._core = Accumulator(size, name)
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._core.name

    @property
    def size(self) -> int:
        return self._core.size

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._core.cursor

    @property
    def ticks(self) -> int:
        with self._lock:
            return self._core.ticks

    def add(self, value: int):
        with self._lock:
            self._core.add(value)

    def tick(self):
        with self._lock:
            self._core.tick()

    def reset(self):
        with self._lock:
            self._core.reset()

    def peek_sum(self) -> int:
        with self._lock:
            return self._core.peek_sum()

    def peek_average(self) -> int:
        with self._lock:
            return self._core.peek_average()

    def get_sum(self, divider: int = 1) -> WindowSnapshot:
        with self._lock:
            return self._core.get_sum(divider)

    def get_average(self, divider: int = 1) -> WindowSnapshot:
        with self._lock:
            return self._core.get_average(divider)

    def render_text(
        self,
        fmt: str = DEFAULT_FORMAT,
        no_data_fmt: str = DEFAULT_NO_DATA_FORMAT,
        average: bool = False,
        divider: int = 1,
        columns: int = 4,
    ) -> str:
        with self._lock:
            return self._core.render_text(fmt, no_data_fmt, average, divider, columns)

    def __repr__(self) -> str:
        return f"SynchronizedAccumulator(name={self.name!r}, size={self.size})"
