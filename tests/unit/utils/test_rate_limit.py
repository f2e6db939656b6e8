import threading

import pytest

from beatify.utils.rate_limit import RateLimiter
from tests.support.stubs import FakeClock


@pytest.mark.unit
def test_first_request_is_not_delayed():
    clock = FakeClock()
    limiter = RateLimiter({"youtube": 100}, clock=clock, sleep=clock.sleep)
    assert limiter.throttle("youtube") == 0.0
    assert clock.sleeps == []


@pytest.mark.unit
def test_back_to_back_requests_wait_out_the_interval():
    clock = FakeClock()
    limiter = RateLimiter({"youtube": 100}, clock=clock, sleep=clock.sleep)
    limiter.throttle("youtube")
    clock.advance(0.04)

    waited = limiter.throttle("youtube")

    assert waited == pytest.approx(0.06)
    assert clock.sleeps == [pytest.approx(0.06)]


@pytest.mark.unit
def test_spaced_requests_and_unlimited_providers_never_sleep():
    clock = FakeClock()
    limiter = RateLimiter({"soundcloud": 200}, clock=clock, sleep=clock.sleep)
    limiter.throttle("soundcloud")
    clock.advance(0.5)
    assert limiter.throttle("soundcloud") == 0.0
    assert limiter.throttle("spotify") == 0.0
    assert limiter.throttle("spotify") == 0.0
    assert limiter.interval_for("spotify") == 0.0
    assert clock.sleeps == []


@pytest.mark.unit
def test_providers_are_throttled_independently():
    clock = FakeClock()
    limiter = RateLimiter({"youtube": 100, "soundcloud": 200}, clock=clock, sleep=clock.sleep)
    limiter.throttle("youtube")
    assert limiter.throttle("soundcloud") == 0.0


@pytest.mark.unit
def test_concurrent_callers_are_serialized():
    clock = FakeClock()
    lock = threading.Lock()

    def sleep(seconds):
        with lock:
            clock.sleep(seconds)

    limiter = RateLimiter({"youtube": 100}, clock=clock, sleep=sleep)
    threads = [threading.Thread(target=limiter.throttle, args=("youtube",)) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    # Four of the five callers had to wait a full interval behind another one
    assert len(clock.sleeps) == 4
    assert all(s == pytest.approx(0.1) for s in clock.sleeps)
