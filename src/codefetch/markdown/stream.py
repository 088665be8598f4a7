"""Stream assembly: records from an async source, emitted chunk by chunk.

Only the current file's section is ever measured; emitted chunks are never
revisited. The project structure block needs every path up front, so it is
not available here.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator

from codefetch.files.models import FileContentRecord
from codefetch.markdown.models import (
    CONTENTS_HEADER,
    FILE_TRUNCATED_MARKER,
    AssemblyOptions,
    remaining_files_marker,
)
from codefetch.markdown.render import render_file_section, trim_tail
from codefetch.tokens.meter import Meter, get_default_meter

logger = logging.getLogger("codefetch.stream")


async def assemble_stream(
    records: AsyncIterable[FileContentRecord],
    options: AssemblyOptions | None = None,
    *,
    meter: Meter | None = None,
) -> AsyncIterator[str]:
    """Yield the document as a header chunk followed by one chunk per file.

    Input is pulled one record at a time, and only after the previous record
    has been rendered, measured and emitted. Once the budget is reached no
    further input is pulled. Closing the generator early closes ``records``
    too, when it supports ``aclose()``.

    Because the source is not read past the budget, the stream cannot tell
    whether records remain. It emits the remaining-files marker whenever the
    budget is exactly used up, even after the last record. ``assemble`` only
    emits it when a record was actually left out.

    Raises:
        UnsupportedEncoderError: If ``options.token_encoder`` is unknown.
    """
    options = options or AssemblyOptions()
    meter = meter or get_default_meter()
    encoder = options.token_encoder
    max_tokens = options.max_tokens
    if options.include_tree_structure:
        logger.debug("Tree structure is not supported in stream mode; ignoring")

    iterator = aiter(records)
    try:
        total_tokens = await meter.count(CONTENTS_HEADER, encoder)
        yield CONTENTS_HEADER

        while True:
            if max_tokens and total_tokens >= max_tokens:
                logger.debug("Token limit %d reached, not reading further files", max_tokens)
                yield remaining_files_marker(max_tokens)
                return

            try:
                record = await anext(iterator)
            except StopAsyncIteration:
                return

            section = render_file_section(record, options.disable_line_numbers)
            section_tokens = await meter.count(section, encoder)

            if max_tokens and total_tokens + section_tokens > max_tokens:
                excess = total_tokens + section_tokens - max_tokens
                logger.debug("Truncating %s (%d tokens over limit)", record.path, excess)
                yield trim_tail(section, excess) + FILE_TRUNCATED_MARKER
                return

            total_tokens += section_tokens
            yield section
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()
