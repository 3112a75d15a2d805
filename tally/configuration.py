# configuration.py - Configuration Helper
# ============================================================================
# FILE: tally/configuration.py
# Declarative histogram and accumulator definitions loaded from files
# ============================================================================

import os
import yaml
import json
import logging
from dataclasses import dataclass, field
from typing import List, Union, Dict, Any

from .core.bucketing import ExponentialBucket
from .core.histogram import Histogram
from .core.accumulator import Accumulator, SynchronizedAccumulator
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class HistogramConfig:
    name: str
    help: str = ""
    start: Union[int, float] = 1
    step: Union[int, float] = 2
    count: int = 20

    def __post_init__(self):
        _require_str(self, "name")
        _require_str(self, "help")
        try:
            ExponentialBucket(self.start, self.step, self.count)
        except ConfigurationError as e:
            raise ConfigurationError(f"histogram '{self.name}': {e}") from e

    def build(self) -> Histogram:
        return Histogram.exponential(self.start, self.step, self.count)

    def render(self, histogram: Histogram) -> str:
        """Render `histogram` under this entry's name and help text."""
        return histogram.render(self.name, self.help)


@dataclass
class AccumulatorConfig:
    name: str
    size: int = 60
    synchronized: bool = True

    def __post_init__(self):
        _require_str(self, "name")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise ConfigurationError(f"accumulator '{self.name}': size must be an integer >= 1, got {self.size!r}")
        if not isinstance(self.synchronized, bool):
            raise ConfigurationError(
                f"accumulator '{self.name}': synchronized must be true or false, got {self.synchronized!r}"
            )

    def build(self) -> Union[Accumulator, SynchronizedAccumulator]:
        if self.synchronized:
            return SynchronizedAccumulator(self.size, self.name)
        return Accumulator(self.size, self.name)


@dataclass
class MetricsConfig:
    histograms: List[HistogramConfig] = field(default_factory=list)
    accumulators: List[AccumulatorConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricsConfig":
        """
        Build a config from a parsed mapping.

        Raises:
            ConfigurationError: on a missing name, an unknown key, an invalid
                value, or a section that is not a list of mappings
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"metrics config must be a mapping, got {type(data).__name__}")

        histograms = [
            _entry(HistogramConfig, item, "histograms")
            for item in _section(data, "histograms")
        ]
        accumulators = [
            _entry(AccumulatorConfig, item, "accumulators")
            for item in _section(data, "accumulators")
        ]
        return cls(histograms=histograms, accumulators=accumulators)

    def build_histograms(self) -> Dict[str, Histogram]:
        return {h.name: h.build() for h in self.histograms}

    def build_accumulators(self) -> Dict[str, Union[Accumulator, SynchronizedAccumulator]]:
        return {a.name: a.build() for a in self.accumulators}


def load_config(path: str) -> MetricsConfig:
    """
    Load metric definitions from a YAML (or .json) file.

    Example:
        histograms:
          - name: api_latency
            help: API latency in microseconds
            start: 1
            step: 2
            count: 20
        accumulators:
          - name: requests
            size: 60
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    config = MetricsConfig.from_dict(data)
    logger.info(
        f"Loaded {len(config.histograms)} histogram(s) and "
        f"{len(config.accumulators)} accumulator(s) from {path}"
    )
    return config


def _section(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list):
        raise ConfigurationError(f"'{key}' must be a list, got {type(items).__name__}")
    return items


def _require_str(config, attr: str) -> None:
    value = getattr(config, attr)
    if not isinstance(value, str):
        raise ConfigurationError(f"{type(config).__name__}.{attr} must be a string, got {value!r}")


def _entry(cls, item: Any, section: str):
    if not isinstance(item, dict):
        raise ConfigurationError(f"entries in '{section}' must be mappings, got {item!r}")
    if not item.get("name"):
        raise ConfigurationError(f"entry in '{section}' is missing a name: {item!r}")
    try:
        return cls(**item)
    except TypeError as e:
        raise ConfigurationError(f"invalid entry in '{section}': {e}") from e
