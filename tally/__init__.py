# tally/__init__.py

from ._version import __version__
from .core.bucketing import Bucketing, ExponentialBucket
from .core.histogram import Histogram
from .core.accumulator import Accumulator, SynchronizedAccumulator, WindowSnapshot
from .monitoring.exposition import Renderable, render_structure
from .monitoring.ticker import Ticker
from .configuration import HistogramConfig, AccumulatorConfig, MetricsConfig, load_config
from .errors import TallyError, ConfigurationError, NoDataError

__all__ = [
    "Bucketing",
    "ExponentialBucket",
    "Histogram",
    "Accumulator",
    "SynchronizedAccumulator",
    "WindowSnapshot",
    "Renderable",
    "render_structure",
    "Ticker",
    "HistogramConfig",
    "AccumulatorConfig",
    "MetricsConfig",
    "load_config",
    "TallyError",
    "ConfigurationError",
    "NoDataError",
    "__version__",
]
