import pytest
import redis

from app.services.lock_service import LockService


class StubRedis:
    """SET NX + compare-and-delete, bez serwera."""

    def __init__(self, failures=0):
        self.store = {}
        self.failures = failures
        self.calls = 0

    def set(self, name, value, nx=False, ex=None):
        self.calls += 1
        if self.failures:
            self.failures -= 1
            raise redis.ConnectionError("redis niedostepny")
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


@pytest.fixture
def lock():
    svc = LockService("redis://localhost:6379/0")
    svc.redis = StubRedis()
    return svc


def test_second_acquire_for_same_user_fails(lock):
    token = lock.acquire_checkout_lock(1, ttl=30)

    assert token
    assert lock.acquire_checkout_lock(1, ttl=30) is None
    assert lock.acquire_checkout_lock(2, ttl=30)


def test_only_owner_token_releases(lock):
    token = lock.acquire_checkout_lock(1, ttl=30)

    assert lock.release_checkout_lock(1, "cudzy") is False
    assert lock.acquire_checkout_lock(1, ttl=30) is None
    assert lock.release_checkout_lock(1, token) is True
    assert lock.acquire_checkout_lock(1, ttl=30)


def test_transient_redis_errors_are_retried(lock):
    lock.redis = StubRedis(failures=2)

    assert lock.acquire_checkout_lock(1, ttl=30)
    assert lock.redis.calls == 3


def test_persistent_redis_error_is_raised(lock):
    lock.redis = StubRedis(failures=5)

    with pytest.raises(redis.ConnectionError):
        lock.acquire_checkout_lock(1, ttl=30)
