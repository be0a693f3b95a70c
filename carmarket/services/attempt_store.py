# carmarket/services/attempt_store.py
import threading
import uuid
from collections import defaultdict

import redis

from carmarket.utils.retry import redis_retry
from carmarket.utils.settings import REDIS_URL


class MemoryAttemptStore:
    """
    Process-local storage for failed logins and IP blocks.
    Restarting the process forgets everything; fine for a single instance only.
    """

    def __init__(self):
        self._failures: dict[tuple[str, str], list[float]] = defaultdict(list)
        self._blocked: dict[str, float] = {}
        self._lock = threading.Lock()

    def add_failure(self, ip: str, username: str, now: float, window: float) -> int:
        with self._lock:
            key = (ip, username)
            recent = [ts for ts in self._failures[key] if now - ts < window]
            recent.append(now)
            self._failures[key] = recent
            return len(recent)

    def count_failures(self, ip: str, username: str, now: float, window: float) -> int:
        with self._lock:
            return sum(1 for ts in self._failures.get((ip, username), ()) if now - ts < window)

    def clear_failures(self, ip: str, username: str) -> None:
        with self._lock:
            self._failures.pop((ip, username), None)

    def block(self, ip: str, until: float, ttl: float) -> None:
        with self._lock:
            self._blocked[ip] = until

    def blocked_until(self, ip: str) -> float | None:
        with self._lock:
            return self._blocked.get(ip)

    def unblock(self, ip: str) -> None:
        with self._lock:
            self._blocked.pop(ip, None)


class RedisAttemptStore:
    """
    Shared storage for several app instances.
    -failures: sorted set per (ip, username), score = timestamp
    -block: plain key per ip holding the unblock time, expires on its own
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _failures_key(ip: str, username: str) -> str:
        return f"login:failures:{ip}:{username}"

    @staticmethod
    def _block_key(ip: str) -> str:
        return f"login:block:{ip}"

    @redis_retry()
    def add_failure(self, ip: str, username: str, now: float, window: float) -> int:
        key = self._failures_key(ip, username)
        pipe = self.redis.pipeline()
        # entries exactly `window` old are already out of the window
        pipe.zremrangebyscore(key, "-inf", now - window)
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.zcard(key)
        pipe.expire(key, int(window) + 1)
        _, _, count, _ = pipe.execute()
        return int(count)

    @redis_retry()
    def count_failures(self, ip: str, username: str, now: float, window: float) -> int:
        return int(self.redis.zcount(self._failures_key(ip, username), f"({now - window}", "+inf"))

    @redis_retry()
    def clear_failures(self, ip: str, username: str) -> None:
        self.redis.delete(self._failures_key(ip, username))

    @redis_retry()
    def block(self, ip: str, until: float, ttl: float) -> None:
        self.redis.set(self._block_key(ip), str(until), ex=max(1, int(ttl) + 1))

    @redis_retry()
    def blocked_until(self, ip: str) -> float | None:
        value = self.redis.get(self._block_key(ip))
        return float(value) if value is not None else None

    @redis_retry()
    def unblock(self, ip: str) -> None:
        self.redis.delete(self._block_key(ip))
