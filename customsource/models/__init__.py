"""Pydantic models for configurations and results."""

from customsource.models.config import (
    ChapterSelectors,
    ContentSelectors,
    DetailSelectors,
    MangaListSelectors,
    ScrapingConfig,
    SourceSelectors,
    create_blank_config,
    generate_source_id,
)
from customsource.models.results import (
    ChapterItem,
    ContentMetadata,
    DetailRecord,
    FetchResult,
    MangaItem,
    MangasPage,
    MangaStatus,
    StepResult,
    TestReport,
)

__all__ = [
    'ChapterItem',
    'ChapterSelectors',
    'ContentMetadata',
    'ContentSelectors',
    'DetailRecord',
    'DetailSelectors',
    'FetchResult',
    'MangaItem',
    'MangaListSelectors',
    'MangaStatus',
    'MangasPage',
    'ScrapingConfig',
    'SourceSelectors',
    'StepResult',
    'TestReport',
    'create_blank_config',
    'generate_source_id',
]
