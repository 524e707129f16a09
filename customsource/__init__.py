"""customsource - declarative custom scraping sources.

Describe a site once as selectors and URL templates, then list, search,
read details, chapters and chapter text through one source interface.
"""

from customsource.core import (
    CatalogSource,
    CustomSource,
    DelegatingStrategy,
    Document,
    LocalSelectorStrategy,
    SourceRegistry,
    SourceTester,
)
from customsource.core.fetcher import HTMLFetcher, PlaywrightFetcher, SimpleFetcher, SmartFetcher, create_fetcher
from customsource.exceptions import BotDetectionError, ConfigValidationError, CustomSourceError, FetchError
from customsource.models import (
    ChapterItem,
    ChapterSelectors,
    ContentSelectors,
    DetailRecord,
    DetailSelectors,
    FetchResult,
    MangaItem,
    MangaListSelectors,
    MangasPage,
    MangaStatus,
    ScrapingConfig,
    SourceSelectors,
    StepResult,
    TestReport,
    create_blank_config,
)
from customsource.storage import SourceStorage
from customsource.validator import validate_config

__all__ = [
    # Runtime
    'CatalogSource',
    'CustomSource',
    'DelegatingStrategy',
    'Document',
    'LocalSelectorStrategy',
    'SourceRegistry',
    'SourceStorage',
    'SourceTester',
    # Fetchers
    'FetchResult',
    'HTMLFetcher',
    'PlaywrightFetcher',
    'SimpleFetcher',
    'SmartFetcher',
    'create_fetcher',
    # Errors
    'BotDetectionError',
    'ConfigValidationError',
    'CustomSourceError',
    'FetchError',
    # Configuration
    'ChapterSelectors',
    'ContentSelectors',
    'DetailSelectors',
    'MangaListSelectors',
    'ScrapingConfig',
    'SourceSelectors',
    'create_blank_config',
    'validate_config',
    # Results
    'ChapterItem',
    'DetailRecord',
    'MangaItem',
    'MangaStatus',
    'MangasPage',
    'StepResult',
    'TestReport',
]
