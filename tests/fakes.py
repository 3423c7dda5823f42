"""测试用内存键值存储"""

from src.cache.redis_store import CacheResult


class InMemoryStore:
    """实现 get / set_with_expiry / delete 的内存存储，可模拟读写失败"""

    def __init__(self, fail_get: bool = False, fail_set: bool = False):
        self.data = {}
        self.ttls = {}
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.get_calls = []
        self.set_calls = []

    def get(self, key):
        self.get_calls.append(key)
        if self.fail_get:
            return CacheResult.failure(ConnectionError("redis down"))
        if key not in self.data:
            return CacheResult.miss()
        return CacheResult.success(self.data[key])

    def set_with_expiry(self, key, value, ttl_seconds):
        self.set_calls.append(key)
        if self.fail_set:
            return CacheResult.failure(ConnectionError("redis down"))
        self.data[key] = value
        self.ttls[key] = ttl_seconds
        return CacheResult.success()

    def delete(self, key):
        removed = 1 if self.data.pop(key, None) is not None else 0
        return CacheResult.success(removed)
