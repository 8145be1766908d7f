import threading
import time

from saa_practice.services.ticker import SessionTicker


def _wait_for(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_calls_callback_repeatedly():
    calls = []
    ticker = SessionTicker(lambda: calls.append(1), interval=0.01)
    ticker.start()
    try:
        assert _wait_for(lambda: len(calls) >= 3)
    finally:
        ticker.stop()


def test_stop_prevents_further_calls():
    calls = []
    ticker = SessionTicker(lambda: calls.append(1), interval=0.01)
    ticker.start()
    _wait_for(lambda: calls)
    ticker.stop()
    count = len(calls)
    time.sleep(0.05)
    assert len(calls) == count
    assert not ticker.running


def test_stop_from_inside_callback():
    holder = {}
    done = threading.Event()

    def callback():
        holder["ticker"].stop()
        done.set()

    ticker = SessionTicker(callback, interval=0.01)
    holder["ticker"] = ticker
    ticker.start()
    assert done.wait(2.0)
    assert _wait_for(lambda: not ticker.running)


def test_callback_errors_do_not_stop_the_loop():
    calls = []

    def callback():
        calls.append(1)
        raise RuntimeError("boom")

    ticker = SessionTicker(callback, interval=0.01)
    ticker.start()
    try:
        assert _wait_for(lambda: len(calls) >= 2)
    finally:
        ticker.stop()


def test_restart_after_stop():
    calls = []
    ticker = SessionTicker(lambda: calls.append(1), interval=0.01)
    ticker.start()
    ticker.stop()
    ticker.start()
    try:
        assert ticker.running
        assert _wait_for(lambda: calls)
    finally:
        ticker.stop()


def test_stop_without_start_is_safe():
    SessionTicker(lambda: None, interval=0.01).stop()
