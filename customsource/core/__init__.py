"""Core runtime: templating, extraction, fetching, delegation and self-testing."""

from customsource.core.delegation import CatalogSource, DelegatingStrategy, SourceRegistry, resolve_delegate
from customsource.core.document import Document
from customsource.core.source import CustomSource, LocalSelectorStrategy
from customsource.core.templating import build_ajax_url, build_list_url, build_search_url, expand_url
from customsource.core.testing import SourceTester

__all__ = [
    'CatalogSource',
    'CustomSource',
    'DelegatingStrategy',
    'Document',
    'LocalSelectorStrategy',
    'SourceRegistry',
    'SourceTester',
    'build_ajax_url',
    'build_list_url',
    'build_search_url',
    'expand_url',
    'resolve_delegate',
]
