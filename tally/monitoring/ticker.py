# ticker.py - Periodic Accumulator Ticks
# ============================================================================
# FILE: tally/monitoring/ticker.py
# Background thread that rolls accumulator windows forward on a timer
# ============================================================================

import threading
import logging
from typing import Iterable, List, Optional, Union

from ..core.accumulator import Accumulator, SynchronizedAccumulator
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

AnyAccumulator = Union[Accumulator, SynchronizedAccumulator]


class Ticker:
    """
    Calls `tick()` on a set of accumulators every `interval_s` seconds.

    Intended for SynchronizedAccumulator. A plain Accumulator ticked from
    this thread is only safe if the caller keeps `add` away from tick time.
    """

    def __init__(self, accumulators: Iterable[AnyAccumulator] = (), interval_s: float = 1.0):
        if interval_s <= 0:
            raise ConfigurationError(f"ticker interval must be > 0, got {interval_s}")

        self.interval_s = float(interval_s)
        self._accumulators: List[AnyAccumulator] = []
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

        for acc in accumulators:
            self.add(acc)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def accumulators(self) -> List[AnyAccumulator]:
        return list(self._accumulators)

    def add(self, accumulator: AnyAccumulator):
        """Register an accumulator. Only allowed while the ticker is stopped."""
        if self.running:
            raise RuntimeError("cannot add accumulators to a running ticker")
        if isinstance(accumulator, Accumulator):
            logger.warning(
                f"Accumulator '{accumulator.name}' is not synchronized; "
                f"add() must not overlap with ticks from this thread"
            )
        self._accumulators.append(accumulator)

    def start(self):
        if self.running:
            return
        # A fresh event per run: a thread that outlived stop() keeps its own
        # (already set) event and exits after its current pass
        self._stop = threading.Event()
        t = threading.Thread(target=self._run, args=(self._stop,), name="tally-ticker", daemon=True)
        self._thread = t
        t.start()
        logger.info(f"Ticker started ({len(self._accumulators)} accumulators, every {self.interval_s}s)")

    def stop(self, timeout: float = 5.0):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning(f"Ticker thread still busy after {timeout}s; it will exit after its current pass")
            self._thread = None
            logger.info("Ticker stopped")

    def tick_all(self):
        """Tick every registered accumulator once."""
        for acc in self._accumulators:
            try:
                acc.tick()
            except Exception as e:
                logger.error(f"Error ticking accumulator '{acc.name}': {e}")

    def _run(self, stop: threading.Event):
        while not stop.wait(self.interval_s):
            self.tick_all()

    def __enter__(self) -> "Ticker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
