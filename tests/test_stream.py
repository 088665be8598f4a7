"""Tests for streaming assembly."""

from __future__ import annotations

import pytest

from codefetch.exceptions import UnsupportedEncoderError
from codefetch.files.models import FileContentRecord
from codefetch.markdown import AssemblyOptions, assemble, assemble_stream
from codefetch.markdown.models import (
    CONTENTS_HEADER,
    FILE_TRUNCATED_MARKER,
    remaining_files_marker,
)
from codefetch.markdown.render import render_file_section


class Source:
    """Async record source that remembers what was pulled and whether it was closed."""

    def __init__(self, records: list[FileContentRecord]) -> None:
        self.records = records
        self.pulled: list[str] = []
        self.closed = False

    async def __aiter__(self):
        try:
            for record in self.records:
                self.pulled.append(record.path)
                yield record
        finally:
            self.closed = True


async def _collect(source, options, meter=None) -> list[str]:
    return [chunk async for chunk in assemble_stream(source, options, meter=meter)]


def _records(*paths: str) -> list[FileContentRecord]:
    return [FileContentRecord(path=p, content=f"content of {p}") for p in paths]


class TestStream:
    @pytest.mark.asyncio
    async def test_header_then_one_chunk_per_file(self, records):
        chunks = await _collect(Source(records), AssemblyOptions(token_encoder="simple"))
        assert chunks[0] == CONTENTS_HEADER
        assert chunks[1:] == [render_file_section(r) for r in records]

    @pytest.mark.asyncio
    async def test_matches_batch_without_budget(self, records):
        options = AssemblyOptions(token_encoder="simple")
        chunks = await _collect(Source(records), options)
        assert "".join(chunks).strip() == await assemble(records, options)

    @pytest.mark.asyncio
    async def test_raw_sections(self, records):
        options = AssemblyOptions(token_encoder="simple", disable_line_numbers=True)
        chunks = await _collect(Source(records), options)
        assert chunks[1] == render_file_section(records[0], disable_line_numbers=True)

    @pytest.mark.asyncio
    async def test_tiny_budget_pulls_nothing(self, records):
        source = Source(records)
        chunks = await _collect(source, AssemblyOptions(token_encoder="simple", max_tokens=1))
        assert chunks == [CONTENTS_HEADER, remaining_files_marker(1)]
        assert source.pulled == []

    @pytest.mark.asyncio
    async def test_matches_batch_up_to_truncation(self, char_meter):
        records = [
            FileContentRecord(path=p, content="x" * 40)
            for p in ("one.txt", "two.txt", "six.txt")
        ]
        options = AssemblyOptions(max_tokens=45)
        chunks = await _collect(Source(records), options, char_meter)
        batch = await assemble(records, options, meter=char_meter)

        assert chunks[1:3] == [render_file_section(r) for r in records[:2]]
        assert batch.startswith(CONTENTS_HEADER + chunks[1] + chunks[2])
        assert chunks[3].startswith("## six.txt")
        assert chunks[3].endswith(FILE_TRUNCATED_MARKER)
        assert "".join(chunks).strip() == batch

    @pytest.mark.asyncio
    async def test_exact_fit_on_last_record_still_marks_remaining(self, scripted_meter):
        # The stream never reads ahead, so it cannot know the source is exhausted
        meter = scripted_meter(header_tokens=5, section_tokens=5)
        records = _records("a.py")
        source = Source(records)
        options = AssemblyOptions(max_tokens=10)

        chunks = await _collect(source, options, meter)
        batch = await assemble(records, options, meter=meter)

        assert chunks[-1] == remaining_files_marker(10)
        assert source.pulled == ["a.py"]
        assert "Remaining files" not in batch

    @pytest.mark.asyncio
    async def test_stops_pulling_at_budget(self, scripted_meter):
        source = Source(_records("a.py", "b.py", "c.py", "d.py"))
        meter = scripted_meter(header_tokens=10, section_tokens=10)
        chunks = await _collect(source, AssemblyOptions(max_tokens=30), meter)

        assert source.pulled == ["a.py", "b.py"]
        assert chunks[-1] == remaining_files_marker(30)
        assert len(chunks) == 4
        assert source.closed

    @pytest.mark.asyncio
    async def test_overflowing_file_is_truncated(self, char_meter):
        source = Source([
            FileContentRecord(path="small.txt", content="s" * 8),
            FileContentRecord(path="big.txt", content="b" * 400),
            FileContentRecord(path="after.txt", content="a"),
        ])
        chunks = await _collect(source, AssemblyOptions(max_tokens=30), char_meter)

        assert chunks[-1].startswith("## big.txt")
        assert chunks[-1].endswith(FILE_TRUNCATED_MARKER)
        assert "after.txt" not in source.pulled

    @pytest.mark.asyncio
    async def test_truncation_clamps_to_empty_section(self, scripted_meter):
        meter = scripted_meter(header_tokens=1, section_tokens=1000)
        chunks = await _collect(Source(_records("a.py")), AssemblyOptions(max_tokens=5), meter)
        assert chunks == [CONTENTS_HEADER, FILE_TRUNCATED_MARKER]

    @pytest.mark.asyncio
    async def test_early_close_closes_source(self):
        source = Source(_records("a.py", "b.py", "c.py"))
        stream = assemble_stream(source, AssemblyOptions(token_encoder="simple"))
        seen = []
        async for chunk in stream:
            seen.append(chunk)
            if len(seen) == 2:
                break
        await stream.aclose()

        assert source.pulled == ["a.py"]
        assert source.closed

    @pytest.mark.asyncio
    async def test_tree_option_is_ignored(self, records):
        options = AssemblyOptions(token_encoder="simple", include_tree_structure=True)
        chunks = await _collect(Source(records), options)
        assert chunks[0] == CONTENTS_HEADER
        assert not any("# Project Structure" in c for c in chunks)

    @pytest.mark.asyncio
    async def test_empty_source(self):
        source = Source([])
        assert await _collect(source, AssemblyOptions(token_encoder="simple")) == [CONTENTS_HEADER]

    @pytest.mark.asyncio
    async def test_unknown_encoder(self, records):
        with pytest.raises(UnsupportedEncoderError):
            await _collect(Source(records), AssemblyOptions(token_encoder="bogus"))
