# bucketing.py - Bucketing Strategies
# ============================================================================
# FILE: tally/core/bucketing.py
# Maps observed values to histogram buckets
# ============================================================================

import math
from abc import ABC, abstractmethod
from typing import Iterator, List, Union

from ..errors import ConfigurationError


Number = Union[int, float]


class Bucketing(ABC):
    """
    Abstract bucketing policy.

    A policy knows how many finite buckets it has, the upper bound of each
    bucket (by explicit index), and which bucket index a value maps to.
    """

    @property
    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def upper_bound_at(self, index: int) -> int:
        pass

    @abstractmethod
    def bucket_index_for(self, value: Number) -> int:
        pass

    def upper_bounds(self) -> List[int]:
        """All upper bounds in ascending index order."""
        return [self.upper_bound_at(i) for i in range(self.count)]

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[int]:
        for i in range(self.count):
            yield self.upper_bound_at(i)


class ExponentialBucket(Bucketing):
    """
    Buckets whose upper bounds grow geometrically: start * step**k.

    Args:
        start: Smallest finite upper bound, must be > 0
        step: Growth factor between neighbouring bounds, must be > 1
        count: Number of finite buckets, must be > 0

    Note that bucket k collects values in [start*step**k, start*step**(k+1)),
    so a value is counted under the bound it is at least, not at most.
    """

    def __init__(self, start: Number, step: Number, count: int):
        _require_number("start", start)
        _require_number("step", step)
        if isinstance(count, bool) or not isinstance(count, int):
            raise ConfigurationError(f"count must be an integer, got {count!r}")
        if start <= 0:
            raise ConfigurationError(f"start must be > 0, got {start}")
        if step <= 1:
            raise ConfigurationError(f"step must be > 1, got {step}")
        if count <= 0:
            raise ConfigurationError(f"count must be > 0, got {count}")

        self.start = start
        self.step = step
        self._count = count
        self.log_step = math.log(step)

    @property
    def count(self) -> int:
        return self._count

    def upper_bound_at(self, index: int) -> int:
        """Upper bound of bucket `index`: floor(start * step**index)."""
        if not 0 <= index < self._count:
            raise IndexError(f"bucket index {index} out of range [0, {self._count})")
        return int(math.floor(self.start * self.step ** index))

    def bucket_index_for(self, value: Number) -> int:
        """
        Inverse of the exponential growth.

        Values below `start` go to bucket 0. The result is not clamped to
        `count - 1`; callers decide where overflow lands.
        """
        if value < self.start:
            return 0
        # math.log handles ints beyond float range
        return int(math.floor((math.log(value) - math.log(self.start)) / self.log_step))

    def __repr__(self) -> str:
        return f"ExponentialBucket(start={self.start}, step={self.step}, count={self._count})"


def _require_number(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
