"""File discovery, ignore rules and loading for codefetch."""

from codefetch.files.ignore import PatternMatcher, build_matcher
from codefetch.files.loader import iter_records, load_records
from codefetch.files.models import FileContentRecord, detect_language
from codefetch.files.walker import iter_files, walk

__all__ = [
    "FileContentRecord",
    "PatternMatcher",
    "build_matcher",
    "detect_language",
    "iter_files",
    "iter_records",
    "load_records",
    "walk",
]
