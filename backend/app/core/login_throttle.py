"""Login Throttle — per-identity failed-attempt counter with a time-boxed lockout.

Invariants:
    - States cycle Clear -> Accumulating -> Locked -> Clear
    - A record exists only between the first failure and the next success
      (or the first check after the lockout window elapsed)
    - Locked iff failure_count >= max_attempts and
      now - last_failure_at < lockout_window
    - Identities are compared trimmed and lower-cased

Design Decisions:
    - State lives in an injected LoginAttemptStore created at app startup,
      not in a module-level dict: lifecycle is explicit and tests get a fresh store
    - Every public method runs under one threading.Lock, so each check/record
      is atomic. The check -> verify credentials -> record sequence of a
      login is NOT serialized per identity: concurrent logins for the same
      email can register more than max_attempts failures before lockout
    - Clock injected as a callable: tests simulate elapsed time without sleeping
"""

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.core.repository_protocols import LoginAttemptStore

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_LOCKOUT_WINDOW = timedelta(minutes=30)


@dataclass(frozen=True)
class LoginAttemptRecord:
    """Failed-login bookkeeping for one identity."""
    failure_count: int
    last_failure_at: datetime


@dataclass(frozen=True)
class ThrottleDecision:
    """Outcome of a lockout check."""
    allowed: bool
    failure_count: int = 0
    retry_after_seconds: int = 0


class InMemoryLoginAttemptStore:
    """Process-local LoginAttemptStore. Lost on restart."""

    def __init__(self) -> None:
        self._records: dict[str, LoginAttemptRecord] = {}

    def get(self, identity: str) -> LoginAttemptRecord | None:
        return self._records.get(identity)

    def save(self, identity: str, record: LoginAttemptRecord) -> None:
        self._records[identity] = record

    def delete(self, identity: str) -> None:
        self._records.pop(identity, None)

    def __len__(self) -> int:
        return len(self._records)


def normalize_identity(identity: str) -> str:
    return identity.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LoginThrottle:
    """Lockout policy over a LoginAttemptStore."""

    def __init__(
        self,
        store: LoginAttemptStore,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        lockout_window: timedelta = DEFAULT_LOCKOUT_WINDOW,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.lockout_window = lockout_window
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def lockout_minutes(self) -> int:
        return int(self.lockout_window.total_seconds() // 60)

    def check(self, identity: str) -> ThrottleDecision:
        """Decide whether a login attempt may proceed. Clears expired lockouts."""
        key = normalize_identity(identity)
        with self._lock:
            record = self.store.get(key)
            if record is None:
                return ThrottleDecision(allowed=True)
            if record.failure_count < self.max_attempts:
                return ThrottleDecision(
                    allowed=True, failure_count=record.failure_count,
                )
            elapsed = self._clock() - record.last_failure_at
            if elapsed < self.lockout_window:
                remaining = self.lockout_window - elapsed
                return ThrottleDecision(
                    allowed=False,
                    failure_count=record.failure_count,
                    retry_after_seconds=max(1, int(remaining.total_seconds())),
                )
            # Window elapsed: back to Clear
            self.store.delete(key)
            return ThrottleDecision(allowed=True)

    def check_allowed(self, identity: str) -> bool:
        return self.check(identity).allowed

    def record_failure(self, identity: str) -> LoginAttemptRecord:
        """Count one failed login and stamp its time."""
        key = normalize_identity(identity)
        with self._lock:
            now = self._clock()
            record = self.store.get(key)
            if record is None:
                record = LoginAttemptRecord(failure_count=1, last_failure_at=now)
            else:
                record = replace(
                    record,
                    failure_count=record.failure_count + 1,
                    last_failure_at=now,
                )
            self.store.save(key, record)
            return record

    def record_success(self, identity: str) -> None:
        with self._lock:
            self.store.delete(normalize_identity(identity))
