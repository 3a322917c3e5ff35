"""
Per-provider admission lock.

Booking admission (count overlapping bookings, then insert/move one) must not
interleave for the same provider. The lock is held across check, write and
commit. With ``REDIS_URL`` configured the lock lives in Redis (``SET NX EX``)
and spans every worker process; otherwise an in-process lock per provider id
is used. Waits are bounded by ``provider_lock_wait_seconds``.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Dict, Iterator, Optional
import uuid

from redis import Redis

from servicebooking.core.config import settings
from servicebooking.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

_POLL_INTERVAL_SECONDS = 0.05
_LOCK_NAMESPACE = "servicebooking:lock"


def _lock_key(provider_id: int) -> str:
    return f"{_LOCK_NAMESPACE}:provider:{provider_id}:admission"


class ProviderLockManager:
    """Hands out admission locks keyed by provider id."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        *,
        ttl_seconds: int = 30,
        wait_seconds: float = 5.0,
        redis_client: Optional[Redis] = None,
    ) -> None:
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.wait_seconds = wait_seconds
        self._redis: Optional[Redis] = redis_client
        self._redis_checked = redis_client is not None
        self._redis_init_lock = threading.Lock()
        self._local_locks: Dict[int, threading.Lock] = {}
        self._local_registry_lock = threading.Lock()

    @property
    def backend(self) -> str:
        return "redis" if self._get_redis() is not None else "local"

    def _get_redis(self) -> Optional[Redis]:
        if self._redis_checked:
            return self._redis
        with self._redis_init_lock:
            if self._redis_checked:
                return self._redis
            self._redis_checked = True
            if not self.redis_url:
                return None
            try:
                client = Redis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)
                client.ping()
            except Exception as exc:
                logger.warning("provider_lock_redis_unavailable, using in-process locks: %s", exc)
                return None
            self._redis = client
            return self._redis

    def _local_lock(self, provider_id: int) -> threading.Lock:
        with self._local_registry_lock:
            lock = self._local_locks.get(provider_id)
            if lock is None:
                lock = self._local_locks[provider_id] = threading.Lock()
            return lock

    # Redis backend

    def _acquire_redis(self, client: Redis, provider_id: int, token: str) -> bool:
        deadline = time.monotonic() + self.wait_seconds
        key = _lock_key(provider_id)
        while True:
            if client.set(key, token, nx=True, ex=self.ttl_seconds):
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(_POLL_INTERVAL_SECONDS)

    def _release_redis(self, client: Redis, provider_id: int, token: str) -> None:
        key = _lock_key(provider_id)
        try:
            # Only the holder may release; an expired lock may already belong to someone else
            if client.get(key) == token:
                client.delete(key)
            else:
                logger.warning(
                    "provider_lock_expired_before_release",
                    extra={"provider_id": provider_id},
                )
        except Exception as exc:
            prometheus_metrics.record_provider_lock("redis", "release_error")
            logger.warning(
                "provider_lock_release_failed",
                extra={"provider_id": provider_id, "error": str(exc)},
            )

    @contextmanager
    def hold(self, provider_id: int) -> Iterator[bool]:
        """
        Hold the admission lock for ``provider_id``.

        Yields:
            True when the lock was acquired within the wait budget, False otherwise.
            The caller decides what a False means; nothing is held in that case.
        """
        client = self._get_redis()
        if client is not None:
            token = uuid.uuid4().hex
            try:
                acquired = self._acquire_redis(client, provider_id, token)
            except Exception as exc:
                prometheus_metrics.record_provider_lock("redis", "error")
                logger.warning(
                    "provider_lock_redis_acquire_failed, using in-process lock",
                    extra={"provider_id": provider_id, "error": str(exc)},
                )
            else:
                prometheus_metrics.record_provider_lock("redis", "acquired" if acquired else "timeout")
                try:
                    yield acquired
                finally:
                    if acquired:
                        self._release_redis(client, provider_id, token)
                return

        lock = self._local_lock(provider_id)
        acquired = lock.acquire(timeout=self.wait_seconds)
        prometheus_metrics.record_provider_lock("local", "acquired" if acquired else "timeout")
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()


_manager: Optional[ProviderLockManager] = None
_manager_lock = threading.Lock()


def get_provider_lock_manager() -> ProviderLockManager:
    """Process-wide lock manager built from settings."""
    global _manager
    if _manager is None:
        with _manager_lock:
            if _manager is None:
                _manager = ProviderLockManager(
                    settings.redis_url,
                    ttl_seconds=settings.provider_lock_ttl_seconds,
                    wait_seconds=settings.provider_lock_wait_seconds,
                )
    return _manager
