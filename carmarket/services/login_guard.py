# carmarket/services/login_guard.py
import time
from typing import Callable

from carmarket.services.attempt_store import MemoryAttemptStore, RedisAttemptStore
from carmarket.utils.settings import (
    LOGIN_GUARD_BACKEND,
    LOGIN_MAX_ATTEMPTS,
    LOGIN_ATTEMPT_WINDOW_SECONDS,
    LOGIN_BLOCK_SECONDS,
)
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class LoginGuard:
    """
    Brute-force protection for /api/login and /api/register.

    Failed logins are counted per (ip, username) inside a sliding window.
    Once the count reaches max_attempts the whole ip is blocked for
    block_seconds. A block is only lifted by time, lazily on the next check.
    """

    def __init__(
        self,
        store=None,
        max_attempts: int = LOGIN_MAX_ATTEMPTS,
        window_seconds: float = LOGIN_ATTEMPT_WINDOW_SECONDS,
        block_seconds: float = LOGIN_BLOCK_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store or MemoryAttemptStore()
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.block_seconds = block_seconds
        self.clock = clock

    def record_attempt(self, ip: str, username: str, success: bool) -> None:
        if success:
            self.store.clear_failures(ip, username)
            return

        now = self.clock()
        failures = self.store.add_failure(ip, username, now, self.window_seconds)
        if failures >= self.max_attempts:
            self.store.block(ip, now + self.block_seconds, self.block_seconds)
            logger.warning(
                f"IP {ip} blocked for {self.block_seconds}s "
                f"({failures} failed attempts for {username!r})"
            )

    def is_blocked(self, ip: str) -> bool:
        until = self.store.blocked_until(ip)
        if until is None:
            return False

        if self.clock() > until:
            self.store.unblock(ip)
            return False

        return True

    def attempts_count(self, ip: str, username: str) -> int:
        return self.store.count_failures(ip, username, self.clock(), self.window_seconds)

    def attempts_left(self, ip: str, username: str) -> int:
        return max(0, self.max_attempts - self.attempts_count(ip, username))


def build_login_guard(backend: str = LOGIN_GUARD_BACKEND) -> LoginGuard:
    if backend == "redis":
        logger.info("Login guard uses Redis storage")
        return LoginGuard(RedisAttemptStore())
    if backend != "memory":
        raise ValueError(f"Unknown login guard backend: {backend}")
    return LoginGuard(MemoryAttemptStore())
