"""Base cache backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def default_cache_dir() -> Path:
    return Path.home() / ".cache" / "codefetch"


class CacheOptions(BaseModel):
    """Options understood by every backend (each uses what applies to it)."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    ttl_seconds: int | None = Field(default=3600, gt=0)  # None = never expire
    max_entries: int = Field(default=100, gt=0)
    cache_dir: Path | None = None  # None = ~/.cache/codefetch
    namespace: Any = None  # edge KV binding
    key_prefix: str = "codefetch:"


class CacheBackend(ABC):
    """Abstract base for cache backends. Values are strings."""

    def __init__(self, options: CacheOptions | None = None) -> None:
        self.options = options or CacheOptions()

    def _ttl(self, ttl: int | None) -> int | None:
        return ttl if ttl is not None else self.options.ttl_seconds

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the cached value, or None if absent or expired."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store a value. ``ttl`` overrides the backend default (seconds)."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...
