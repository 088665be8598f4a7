"""Cache backends for assembled documents."""

from codefetch.cache.base import CacheBackend, CacheOptions
from codefetch.cache.factory import Runtime, create_cache, create_cache_of_type, detect_runtime
from codefetch.cache.layer import cache_key, cached_assemble

__all__ = [
    "CacheBackend",
    "CacheOptions",
    "Runtime",
    "cache_key",
    "cached_assemble",
    "create_cache",
    "create_cache_of_type",
    "detect_runtime",
]
