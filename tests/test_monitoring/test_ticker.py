# tests/test_monitoring/test_ticker.py

import logging
import threading
import time

import pytest

from tally.core.accumulator import Accumulator, SynchronizedAccumulator
from tally.errors import ConfigurationError
from tally.monitoring.ticker import Ticker


class BrokenAccumulator:
    name = "broken"

    def tick(self):
        raise RuntimeError("boom")


def test_tick_all_advances_every_accumulator():
    a = SynchronizedAccumulator(3, name="a")
    b = SynchronizedAccumulator(3, name="b")
    ticker = Ticker([a, b], interval_s=60)

    a.add(5)
    ticker.tick_all()

    assert a.ticks == 1
    assert b.ticks == 1
    assert a.peek_sum() == 5


def test_background_thread_ticks():
    acc = SynchronizedAccumulator(5, name="requests")
    with Ticker([acc], interval_s=0.01) as ticker:
        assert ticker.running
        deadline = time.time() + 2.0
        while acc.ticks < 3 and time.time() < deadline:
            time.sleep(0.01)
    assert not ticker.running
    assert acc.ticks >= 3


def test_stop_is_idempotent():
    ticker = Ticker(interval_s=0.01)
    ticker.start()
    ticker.stop()
    ticker.stop()
    assert not ticker.running


def test_errors_are_logged_and_loop_continues(caplog):
    good = SynchronizedAccumulator(2, name="good")
    ticker = Ticker([BrokenAccumulator(), good], interval_s=60)

    with caplog.at_level(logging.ERROR, logger="tally.monitoring.ticker"):
        ticker.tick_all()

    assert good.ticks == 1
    assert "broken" in caplog.text


def test_plain_accumulator_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="tally.monitoring.ticker"):
        Ticker([Accumulator(2, name="plain")], interval_s=1)
    assert "not synchronized" in caplog.text


def test_invalid_interval():
    with pytest.raises(ConfigurationError):
        Ticker(interval_s=0)


def test_cannot_add_while_running():
    ticker = Ticker(interval_s=10)
    ticker.start()
    try:
        with pytest.raises(RuntimeError):
            ticker.add(SynchronizedAccumulator(2))
    finally:
        ticker.stop()
    assert len(ticker.accumulators) == 0


class SlowAccumulator:
    name = "slow"

    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()

    def tick(self):
        self.entered.set()
        self.release.wait(5.0)


def test_thread_outliving_stop_exits_after_restart():
    """A ticker restarted while its old thread is mid-tick never runs two loops"""
    slow = SlowAccumulator()
    ticker = Ticker([slow], interval_s=0.01)
    ticker.start()
    assert slow.entered.wait(2.0)

    old_thread = ticker._thread
    ticker.stop(timeout=0.05)
    assert old_thread.is_alive()

    ticker.start()
    slow.release.set()
    old_thread.join(timeout=2.0)
    try:
        assert not old_thread.is_alive()
        assert ticker.running
    finally:
        ticker.stop()
