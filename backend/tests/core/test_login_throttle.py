"""Tests for LoginThrottle — lockout cycle driven by an injected clock."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.login_throttle import InMemoryLoginAttemptStore, LoginThrottle

EMAIL = "alice@example.com"


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryLoginAttemptStore()


@pytest.fixture
def throttle(store, clock):
    return LoginThrottle(store, clock=clock)


def _fail(throttle, times, identity=EMAIL):
    for _ in range(times):
        throttle.record_failure(identity)


def test_unknown_identity_is_allowed(throttle):
    assert throttle.check_allowed(EMAIL)


def test_below_max_attempts_is_allowed(throttle):
    _fail(throttle, 4)
    decision = throttle.check(EMAIL)
    assert decision.allowed
    assert decision.failure_count == 4


def test_fifth_failure_locks(throttle):
    _fail(throttle, 5)
    decision = throttle.check(EMAIL)
    assert not decision.allowed
    assert decision.retry_after_seconds == 30 * 60


def test_retry_after_counts_down(throttle, clock):
    _fail(throttle, 5)
    clock.advance(minutes=29, seconds=30)
    assert throttle.check(EMAIL).retry_after_seconds == 30


def test_lockout_expires_and_clears_record(throttle, store, clock):
    _fail(throttle, 5)
    clock.advance(minutes=31)
    assert throttle.check_allowed(EMAIL)
    assert len(store) == 0


def test_lockout_ends_exactly_at_window(throttle, clock):
    _fail(throttle, 5)
    clock.advance(minutes=30)
    assert throttle.check_allowed(EMAIL)


def test_failure_after_expiry_starts_from_one(throttle, clock):
    _fail(throttle, 5)
    clock.advance(minutes=31)
    throttle.check(EMAIL)
    assert throttle.record_failure(EMAIL).failure_count == 1


def test_success_clears_failures(throttle, store):
    _fail(throttle, 3)
    throttle.record_success(EMAIL)
    assert store.get(EMAIL) is None
    _fail(throttle, 4)
    assert throttle.check_allowed(EMAIL)


def test_failures_stamp_latest_time(throttle, store, clock):
    throttle.record_failure(EMAIL)
    clock.advance(minutes=5)
    throttle.record_failure(EMAIL)
    assert store.get(EMAIL).last_failure_at == clock.now


def test_identity_is_case_insensitive(throttle):
    _fail(throttle, 5, identity="Alice@Example.com ")
    assert not throttle.check_allowed(EMAIL)


def test_identities_are_independent(throttle):
    _fail(throttle, 5)
    assert throttle.check_allowed("bob@example.com")


def test_custom_policy(store, clock):
    throttle = LoginThrottle(
        store, max_attempts=2, lockout_window=timedelta(minutes=1), clock=clock,
    )
    _fail(throttle, 2)
    assert not throttle.check_allowed(EMAIL)
    assert throttle.lockout_minutes == 1
