from app import create_app
from conftest import FakeClock, GatekeeperTestConfig, login
from security.rate_limit import SlidingWindowRateLimiter


def test_allows_up_to_the_limit():
    clock = FakeClock(100.0)
    limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=10, clock=clock)

    for _ in range(5):
        assert limiter.hit("login") == (True, 0)

    allowed, retry_after = limiter.hit("login")
    assert allowed is False
    assert retry_after == 10


def test_window_slides():
    clock = FakeClock(100.0)
    limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=10, clock=clock)

    limiter.hit("login")
    clock.advance(6)
    limiter.hit("login")

    clock.advance(3)
    allowed, retry_after = limiter.hit("login")
    assert not allowed
    assert retry_after == 1

    # The first hit has left the window, the second has not
    clock.advance(1)
    assert limiter.hit("login")[0] is True
    assert limiter.hit("login")[0] is False


def test_rejected_hits_are_not_recorded():
    clock = FakeClock(0.0)
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=10, clock=clock)

    limiter.hit("login")
    for _ in range(20):
        clock.advance(0.1)
        limiter.hit("login")

    clock.advance(8.5)
    assert limiter.hit("login")[0] is True


def test_keys_are_independent_and_resettable():
    clock = FakeClock(0.0)
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=10, clock=clock)

    assert limiter.hit("login:10.0.0.1")[0]
    assert limiter.hit("login:10.0.0.2")[0]
    assert not limiter.hit("login:10.0.0.1")[0]

    limiter.reset("login:10.0.0.1")
    assert limiter.hit("login:10.0.0.1")[0]

    limiter.reset()
    assert limiter.hit("login:10.0.0.2")[0]


def test_injected_limiter_is_used(clock):
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock(0.0))
    app = create_app(GatekeeperTestConfig, rate_limiter=limiter)
    client = app.test_client()

    assert login(client).status_code == 200
    assert login(client).status_code == 429


def test_idle_keys_are_dropped():
    clock = FakeClock(0.0)
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=10, clock=clock)

    for i in range(100):
        limiter.hit(f"login:10.0.{i // 256}.{i % 256}")
    assert len(limiter) == 100

    clock.advance(10)
    limiter.hit("login:10.0.0.1")
    assert len(limiter) == 1


def test_rejected_key_is_kept_while_in_window():
    clock = FakeClock(0.0)
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=10, clock=clock)

    limiter.hit("login:10.0.0.1")
    clock.advance(5)
    assert limiter.hit("login:10.0.0.1")[0] is False
    assert limiter.hit("login:10.0.0.2")[0] is True
    assert len(limiter) == 2
