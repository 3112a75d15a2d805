# tally/core - Histogram and accumulator engines

from .bucketing import Bucketing, ExponentialBucket
from .histogram import Histogram
from .accumulator import Accumulator, SynchronizedAccumulator, WindowSnapshot

__all__ = [
    "Bucketing",
    "ExponentialBucket",
    "Histogram",
    "Accumulator",
    "SynchronizedAccumulator",
    "WindowSnapshot",
]
