"""Read walked files into FileContentRecords for the assemblers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from pathlib import Path

from codefetch.files.models import FileContentRecord, detect_language

logger = logging.getLogger("codefetch.loader")


def read_record(root: Path, file_path: Path) -> FileContentRecord | None:
    """Load one file. Returns None if it cannot be read."""
    try:
        raw = file_path.read_bytes()
    except OSError as e:
        logger.warning("Skipping unreadable file %s: %s", file_path, e)
        return None

    rel_path = file_path.relative_to(root).as_posix()
    return FileContentRecord(
        path=rel_path,
        content=raw.decode("utf-8", errors="replace"),
        language=detect_language(rel_path),
        size=len(raw),
    )


def load_records(root: str | Path, paths: Iterable[Path]) -> list[FileContentRecord]:
    """Load files for batch assembly, preserving the given order."""
    root = Path(root).resolve()
    records = []
    for file_path in paths:
        record = read_record(root, Path(file_path))
        if record is not None:
            records.append(record)
    return records


async def iter_records(
    root: str | Path, paths: Iterable[Path]
) -> AsyncIterator[FileContentRecord]:
    """Load files one at a time for stream assembly.

    File reads run in a worker thread; ``paths`` is consumed lazily, so a
    generator from ``iter_files`` is only walked as far as the consumer pulls.
    """
    root = Path(root).resolve()
    for file_path in paths:
        record = await asyncio.to_thread(read_record, root, Path(file_path))
        if record is not None:
            yield record
