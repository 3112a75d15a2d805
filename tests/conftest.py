# tests/conftest.py
# Shared fixtures for histogram and accumulator tests

import pytest

from tally.core.accumulator import Accumulator, SynchronizedAccumulator
from tally.core.histogram import Histogram


@pytest.fixture(params=[Accumulator, SynchronizedAccumulator], ids=["plain", "synchronized"])
def accumulator_cls(request):
    """Run accumulator tests against both flavours; they share one algorithm."""
    return request.param


@pytest.fixture
def filled_accumulator(accumulator_cls):
    """size=3 with two closed intervals: [10] and [20, 5]."""
    acc = accumulator_cls(3, name="lat")
    acc.add(10)
    acc.tick()
    acc.add(20)
    acc.add(5)
    acc.tick()
    return acc


@pytest.fixture
def decade_histogram():
    """Bounds [1, 10, 100]."""
    return Histogram.exponential(start=1, step=10, count=3)
