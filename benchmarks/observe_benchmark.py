# benchmarks/observe_benchmark.py

import argparse
import random
import threading
import time
import logging

# Fix imports to run from root
import sys
import os
sys.path.append(os.getcwd())

from tally import Accumulator, Histogram, SynchronizedAccumulator

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("Benchmark")


def run_threads(n_threads: int, target) -> float:
    threads = [threading.Thread(target=target) for _ in range(n_threads)]
    start = time.perf_counter()
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return time.perf_counter() - start


def bench_histogram(n_threads: int, per_thread: int) -> float:
    h = Histogram.exponential(start=1, step=2, count=24)
    values = [int(random.expovariate(1 / 2000)) for _ in range(per_thread)]

    def worker():
        for v in values:
            h.observe(v)

    elapsed = run_threads(n_threads, worker)
    assert h.count == n_threads * per_thread
    return elapsed


def bench_accumulator(acc, n_threads: int, per_thread: int) -> float:
    def worker():
        for i in range(per_thread):
            acc.add(i)

    return run_threads(n_threads, worker)


def main():
    parser = argparse.ArgumentParser(description="Hot-path throughput for histograms and accumulators")
    parser.add_argument("--threads", type=int, default=4)
    parser.add_argument("--ops", type=int, default=100_000, help="Operations per thread")
    args = parser.parse_args()

    total = args.threads * args.ops
    print(f"{'Primitive':<28} | {'Threads':<8} | {'Time (s)':<10} | {'ops/s'}")
    print("-" * 70)

    rows = [
        ("Histogram.observe", args.threads, bench_histogram(args.threads, args.ops)),
        ("Accumulator.add", 1, bench_accumulator(Accumulator(60), 1, total)),
        ("SynchronizedAccumulator.add", args.threads,
         bench_accumulator(SynchronizedAccumulator(60), args.threads, args.ops)),
    ]
    for name, threads, elapsed in rows:
        print(f"{name:<28} | {threads:<8} | {elapsed:<10.4f} | {total / elapsed:,.0f}")

    logger.info("Plain Accumulator runs single-threaded: it is only safe with one writer.")


if __name__ == "__main__":
    main()
