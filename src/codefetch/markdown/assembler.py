"""Batch assembly: a finite record list into one token-budgeted document.

After every rendered file the whole document is re-measured with the token
meter, so the budget check always sees the encoder's real count for exactly
the text that will be returned. When a file pushes the count over budget the
document is cut back by ``excess * CHARS_PER_TOKEN`` characters and closed
with a truncation marker; no further files are rendered.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from codefetch.files.models import FileContentRecord
from codefetch.markdown.models import (
    CONTENTS_HEADER,
    FILE_TRUNCATED_MARKER,
    AssemblyOptions,
    remaining_files_marker,
)
from codefetch.markdown.render import render_file_section, render_tree, trim_tail
from codefetch.tokens.meter import Meter, get_default_meter

logger = logging.getLogger("codefetch.assembler")


async def assemble(
    records: Iterable[FileContentRecord],
    options: AssemblyOptions | None = None,
    *,
    meter: Meter | None = None,
) -> str:
    """Build the complete context document.

    Args:
        records: Files in the order they should be rendered.
        options: Budget, encoder and formatting options.
        meter: Token meter; defaults to the shared tiktoken-backed meter.

    Returns:
        The document with leading/trailing whitespace stripped.

    Raises:
        UnsupportedEncoderError: If ``options.token_encoder`` is unknown.
    """
    records = list(records)
    options = options or AssemblyOptions()
    meter = meter or get_default_meter()
    encoder = options.token_encoder
    max_tokens = options.max_tokens

    document = ""
    if options.include_tree_structure:
        document += render_tree(records)
    document += CONTENTS_HEADER
    total_tokens = await meter.count(document, encoder)

    for index, record in enumerate(records):
        if max_tokens and total_tokens >= max_tokens:
            logger.debug(
                "Token limit %d reached, %d files not rendered",
                max_tokens,
                len(records) - index,
            )
            document += remaining_files_marker(max_tokens)
            break

        document += render_file_section(record, options.disable_line_numbers)
        if not max_tokens:
            continue

        total_tokens = await meter.count(document, encoder)
        if total_tokens > max_tokens:
            logger.debug("Truncating %s (%d tokens over limit)", record.path, total_tokens - max_tokens)
            document = trim_tail(document, total_tokens - max_tokens) + FILE_TRUNCATED_MARKER
            break

    return document.strip()
