"""Read-through memoization over the key-value store.

Values are stored as strings with a fixed TTL and are never invalidated on
write: a reader may see data up to ``ttl`` seconds old. Concurrent misses for
the same key all hit the loader and the last ``SET`` wins.
"""
import json
from functools import wraps

from flask import current_app

from iscogram.extensions.redis_client import get_redis_client


DEFAULT_TTL_SECONDS = 10


class ReadThroughCache:
    def __init__(self, client, ttl: int = DEFAULT_TTL_SECONDS):
        self.client = client
        self.ttl = ttl

    def get_many(self, keys) -> dict:
        keys = list(keys)
        if not keys:
            return {}
        values = self.client.mget(keys)
        return {
            key: value
            for key, value in zip(keys, values)
            if value is not None
        }

    def set(self, key: str, value: str, ttl: int | None = None):
        self.client.set(key, value, ex=ttl or self.ttl)

    def fetch(self, key: str, loader, dumps=json.dumps, loads=json.loads):
        cached = self.client.get(key)
        if cached is not None:
            return loads(cached)

        value = loader()
        if value is None:
            return None
        self.set(key, dumps(value))
        return value

    def memoize(self, key_template: str, dumps=json.dumps, loads=json.loads):
        def decorator(func):
            @wraps(func)
            def wrapper(*args):
                return self.fetch(
                    key_template.format(*args),
                    lambda: func(*args),
                    dumps=dumps,
                    loads=loads,
                )
            return wrapper
        return decorator


def get_cache() -> ReadThroughCache:
    return ReadThroughCache(
        get_redis_client(),
        ttl=current_app.config.get("CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS),
    )
