"""Factory for creating cache backends from the runtime environment."""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path

from codefetch.cache.base import CacheBackend, CacheOptions, default_cache_dir
from codefetch.exceptions import InvalidConfigurationError

logger = logging.getLogger("codefetch.cache")


class Runtime(str, Enum):
    """Where the process is running, as far as caching is concerned."""

    EDGE = "edge"  # Pyodide-based edge worker
    SERVER = "server"  # regular interpreter with a writable cache directory
    MEMORY = "memory"  # anything else


def detect_runtime(cache_dir: Path | None = None) -> Runtime:
    """Probe the environment once; callers keep the result."""
    if sys.platform == "emscripten":
        return Runtime.EDGE
    if _is_writable_dir(cache_dir or default_cache_dir()):
        return Runtime.SERVER
    return Runtime.MEMORY


def create_cache(
    options: CacheOptions | None = None,
    runtime: Runtime | None = None,
) -> CacheBackend:
    """Create the cache backend that fits the runtime environment.

    Args:
        options: Backend options.
        runtime: Skip detection and use this runtime.

    Returns:
        An EdgeCache, FileSystemCache or MemoryCache.
    """
    options = options or CacheOptions()
    if runtime is None:
        runtime = detect_runtime(options.cache_dir)
    logger.debug("Selected %s cache backend", runtime.value)
    return create_cache_of_type(runtime.value, options)


def create_cache_of_type(kind: str, options: CacheOptions | None = None) -> CacheBackend:
    """Create a cache backend by name: edge, filesystem/server or memory.

    Raises:
        InvalidConfigurationError: If the kind is unknown.
    """
    kind = kind.lower()

    if kind == "edge":
        from codefetch.cache.edge import EdgeCache

        return EdgeCache(options)
    elif kind in ("filesystem", "server"):
        from codefetch.cache.filesystem import FileSystemCache

        return FileSystemCache(options)
    elif kind == "memory":
        from codefetch.cache.memory import MemoryCache

        return MemoryCache(options)
    else:
        raise InvalidConfigurationError(
            f"Unknown cache type: '{kind}'. "
            f"Supported types: edge, filesystem, memory"
        )


def _is_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    return os.access(path, os.W_OK)
