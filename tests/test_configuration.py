# tests/test_configuration.py

import json

import pytest

from tally.configuration import (
    AccumulatorConfig,
    HistogramConfig,
    MetricsConfig,
    load_config,
)
from tally.core.accumulator import Accumulator, SynchronizedAccumulator
from tally.core.histogram import Histogram
from tally.errors import ConfigurationError

YAML_CONFIG = """
histograms:
  - name: api_latency
    help: API latency in microseconds
    start: 1
    step: 2
    count: 5
accumulators:
  - name: requests
    size: 30
  - name: batch
    size: 4
    synchronized: false
"""


def test_load_yaml(tmp_path):
    path = tmp_path / "metrics.yaml"
    path.write_text(YAML_CONFIG)

    config = load_config(str(path))

    assert config.histograms == [
        HistogramConfig(name="api_latency", help="API latency in microseconds", start=1, step=2, count=5)
    ]
    assert config.accumulators[0] == AccumulatorConfig(name="requests", size=30, synchronized=True)
    assert config.accumulators[1].synchronized is False


def test_load_json(tmp_path):
    path = tmp_path / "metrics.json"
    path.write_text(json.dumps({"histograms": [{"name": "db", "step": 10, "count": 3}]}))

    config = load_config(str(path))

    assert config.histograms[0].build().upper_limits == (1, 10, 100)
    assert config.accumulators == []


def test_build_all(tmp_path):
    path = tmp_path / "metrics.yaml"
    path.write_text(YAML_CONFIG)
    config = load_config(str(path))

    histograms = config.build_histograms()
    accumulators = config.build_accumulators()

    assert isinstance(histograms["api_latency"], Histogram)
    assert histograms["api_latency"].upper_limits == (1, 2, 4, 8, 16)
    assert isinstance(accumulators["requests"], SynchronizedAccumulator)
    assert isinstance(accumulators["batch"], Accumulator)
    assert accumulators["batch"].size == 4


def test_histogram_config_render():
    cfg = HistogramConfig(name="api", help="API latency", count=2)
    h = cfg.build()
    h.observe(1)
    assert cfg.render(h).startswith("# HELP api API latency\n# TYPE api histogram\n")


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    config = load_config(str(path))
    assert config == MetricsConfig()


@pytest.mark.parametrize("data", [
    {"histograms": [{"help": "no name"}]},
    {"histograms": [{"name": "x", "buckets": 3}]},
    {"accumulators": {"name": "not-a-list"}},
    {"accumulators": ["requests"]},
    ["not", "a", "mapping"],
])
def test_invalid_structure(data):
    with pytest.raises(ConfigurationError):
        MetricsConfig.from_dict(data)


@pytest.mark.parametrize("data", [
    {"histograms": [{"name": "x", "step": 1}]},
    {"histograms": [{"name": "x", "start": 0}]},
    {"histograms": [{"name": "x", "count": "ten"}]},
    {"histograms": [{"name": "x", "help": 42}]},
    {"accumulators": [{"name": "y", "size": 0}]},
    {"accumulators": [{"name": "y", "size": "60"}]},
    {"accumulators": [{"name": "y", "synchronized": "false"}]},
    {"accumulators": [{"name": "y", "synchronized": 0}]},
])
def test_invalid_values_fail_at_load(data):
    """Bad values are rejected when the config is read, not later at build()"""
    with pytest.raises(ConfigurationError):
        MetricsConfig.from_dict(data)


def test_invalid_values_in_file_fail_at_load(tmp_path):
    path = tmp_path / "metrics.yaml"
    path.write_text("accumulators:\n  - name: batch\n    synchronized: \"false\"\n")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_config_dataclasses_validate_directly():
    with pytest.raises(ConfigurationError):
        HistogramConfig(name="x", step=1)
    with pytest.raises(ConfigurationError):
        AccumulatorConfig(name="y", size=0)


def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("histograms: [unclosed")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))
