# examples/config_metrics/run.py
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Optional

from tally import Histogram, Ticker, load_config, render_structure

logging.basicConfig(level=logging.INFO)


@dataclass
class ApiStats:
    hits: int = field(default=0, metadata={"name": "api_hits", "help": "Total API calls"})
    latency: Optional[Histogram] = field(default=None, metadata={"name": "api", "help": "API latency in microseconds"})


def main():
    # 1. Build metrics from the declarative config
    config = load_config("examples/config_metrics/metrics.yaml")
    histograms = config.build_histograms()
    accumulators = config.build_accumulators()

    stats = ApiStats(latency=histograms["api"])
    rps = accumulators["requests_per_second"]

    # 2. Simulate traffic while the ticker closes one interval every 100ms
    with Ticker([rps], interval_s=0.1):
        deadline = time.time() + 1.0
        while time.time() < deadline:
            stats.hits += 1
            stats.latency.observe(int(random.expovariate(1 / 400)))
            rps.add(1)
            time.sleep(0.001)

    # 3. Scrape
    print(render_structure(stats))
    print(rps.render_text(fmt="{name} (peak {max}):\n{values}\n", columns=5))


if __name__ == "__main__":
    main()
