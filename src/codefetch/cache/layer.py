"""Cache wrapper around batch assembly for repeated identical inputs."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable

from codefetch.cache.base import CacheBackend
from codefetch.files.models import FileContentRecord
from codefetch.markdown.assembler import assemble
from codefetch.markdown.models import AssemblyOptions
from codefetch.tokens.meter import Meter

logger = logging.getLogger("codefetch.cache")


def cache_key(records: Iterable[FileContentRecord], options: AssemblyOptions) -> str:
    """SHA-256 over the options and every record, in order."""
    digest = hashlib.sha256()
    digest.update(options.model_dump_json().encode("utf-8"))
    for record in records:
        digest.update(b"\0")
        digest.update(record.model_dump_json().encode("utf-8"))
    return digest.hexdigest()


async def cached_assemble(
    records: Iterable[FileContentRecord],
    options: AssemblyOptions | None,
    cache: CacheBackend,
    *,
    meter: Meter | None = None,
) -> str:
    """Return a cached document for these inputs, assembling it on a miss."""
    records = list(records)
    options = options or AssemblyOptions()
    key = cache_key(records, options)

    cached = await cache.get(key)
    if cached is not None:
        logger.debug("Cache hit for %s", key[:12])
        return cached

    document = await assemble(records, options, meter=meter)
    await cache.set(key, document)
    return document
