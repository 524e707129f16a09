"""Extractors turning fetched documents into listings, details, chapters and content."""

from customsource.core.extraction.chapters import ChapterListExtractor
from customsource.core.extraction.content import ContentExtractor
from customsource.core.extraction.dates import DateParser
from customsource.core.extraction.details import DetailExtractor, parse_status
from customsource.core.extraction.lists import ListExtractor

__all__ = [
    'ChapterListExtractor',
    'ContentExtractor',
    'DateParser',
    'DetailExtractor',
    'ListExtractor',
    'parse_status',
]
