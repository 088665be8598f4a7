"""Cache for edge-worker runtimes, backed by a KV namespace binding.

The binding is the object the worker runtime exposes for a KV namespace
(``env.MY_KV`` in a Python worker). Only ``get``, ``put``, ``delete`` and
``list`` are used, all awaited.
"""

from __future__ import annotations

from codefetch.cache.base import CacheBackend, CacheOptions
from codefetch.exceptions import InvalidConfigurationError

# KV stores reject expirations shorter than a minute
MIN_EDGE_TTL = 60


class EdgeCache(CacheBackend):
    def __init__(self, options: CacheOptions | None = None) -> None:
        super().__init__(options)
        if self.options.namespace is None:
            raise InvalidConfigurationError(
                "Edge cache requires a KV namespace binding (CacheOptions.namespace)"
            )
        self.namespace = self.options.namespace

    def _key(self, key: str) -> str:
        return f"{self.options.key_prefix}{key}"

    async def get(self, key: str) -> str | None:
        return await self.namespace.get(self._key(key))

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        ttl = self._ttl(ttl)
        if ttl:
            await self.namespace.put(self._key(key), value, expirationTtl=max(ttl, MIN_EDGE_TTL))
        else:
            await self.namespace.put(self._key(key), value)

    async def delete(self, key: str) -> None:
        await self.namespace.delete(self._key(key))

    async def clear(self) -> None:
        listing = await self.namespace.list(prefix=self.options.key_prefix)
        for entry in listing.keys:
            await self.namespace.delete(entry.name)
