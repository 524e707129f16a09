"""Forwarding custom sources to pre-existing catalog sources.

A configuration that is "based on" another source forwards every operation
to it verbatim. Resolving that source never fails loudly: an unknown id or a
source missing part of the catalog interface means "no delegate", and the
local selectors are used instead.
"""

import logging
from typing import Any, Protocol, runtime_checkable

from customsource.models import ChapterItem, DetailRecord, MangaItem, MangasPage, ScrapingConfig

logger = logging.getLogger(__name__)

REQUIRED_OPERATIONS = (
    'get_popular',
    'get_latest',
    'search',
    'get_details',
    'get_chapter_list',
    'get_filters',
)


@runtime_checkable
class CatalogSource(Protocol):
    """Operations every catalog source exposes.

    ``fetch_content`` is optional for delegates and checked separately.
    """

    def get_popular(self, page: int) -> MangasPage: ...

    def get_latest(self, page: int) -> MangasPage: ...

    def search(self, page: int, query: str, filters: list[Any] | None = None) -> MangasPage: ...

    def get_details(self, manga: MangaItem) -> DetailRecord: ...

    def get_chapter_list(self, manga: MangaItem) -> list[ChapterItem]: ...

    def get_filters(self) -> list[Any]: ...


class SourceRegistry:
    """In-memory lookup of catalog sources by id."""

    def __init__(self, sources: dict[int, Any] | None = None):
        """Initialize the registry.

        Args:
            sources: Initial id to source mapping

        """
        self._sources: dict[int, Any] = dict(sources or {})

    def register(self, source_id: int, source: Any) -> None:
        """Make ``source`` available under ``source_id``."""
        self._sources[source_id] = source

    def unregister(self, source_id: int) -> None:
        """Forget the source registered under ``source_id``, if any."""
        self._sources.pop(source_id, None)

    def get(self, source_id: int) -> Any | None:
        """Source registered under ``source_id``, or None."""
        return self._sources.get(source_id)

    def __contains__(self, source_id: object) -> bool:
        """True if a source is registered under ``source_id``."""
        return source_id in self._sources

    def __len__(self) -> int:
        """Number of registered sources."""
        return len(self._sources)


def supports_catalog(candidate: Any) -> bool:
    """True if ``candidate`` exposes every required catalog operation."""
    return all(callable(getattr(candidate, name, None)) for name in REQUIRED_OPERATIONS)


def resolve_delegate(config: ScrapingConfig, registry: SourceRegistry | None) -> CatalogSource | None:
    """Find the source a configuration delegates to.

    Args:
        config: Configuration that may name a base source
        registry: Where to look the source up

    Returns:
        The delegate, or None if the configuration has no base source or it
        cannot be used. Never raises.

    """
    source_id = config.based_on_external_source_id
    if source_id is None or registry is None:
        return None

    try:
        candidate = registry.get(source_id)
    except Exception as e:
        logger.debug(f'Looking up base source {source_id} failed: {e}')
        return None

    if candidate is None:
        logger.debug(f'Base source {source_id} for {config.name!r} is not registered')
        return None
    if not supports_catalog(candidate):
        logger.debug(f'Base source {source_id} for {config.name!r} lacks catalog operations')
        return None
    return candidate


class DelegatingStrategy:
    """Forwards every operation to a delegate, bypassing local selectors.

    Attributes:
        delegate: The base source

    """

    def __init__(self, delegate: CatalogSource):
        """Wrap a resolved delegate."""
        self.delegate = delegate

    def get_popular(self, page: int) -> MangasPage:
        """Popular listing of the delegate."""
        return self.delegate.get_popular(page)

    def get_latest(self, page: int) -> MangasPage:
        """Latest listing of the delegate."""
        return self.delegate.get_latest(page)

    def search(self, page: int, query: str, filters: list[Any] | None = None) -> MangasPage:
        """Search results of the delegate."""
        return self.delegate.search(page, query, filters)

    def get_details(self, manga: MangaItem) -> DetailRecord:
        """Details from the delegate."""
        return self.delegate.get_details(manga)

    def get_chapter_list(self, manga: MangaItem) -> list[ChapterItem]:
        """Chapter list from the delegate."""
        return self.delegate.get_chapter_list(manga)

    def get_filters(self) -> list[Any]:
        """Filters of the delegate."""
        return self.delegate.get_filters()

    def fetch_content(self, chapter: ChapterItem) -> str:
        """Chapter text from the delegate, or '' if it cannot provide text."""
        fetch_content = getattr(self.delegate, 'fetch_content', None)
        if not callable(fetch_content):
            logger.debug('Base source cannot fetch chapter text')
            return ''
        return fetch_content(chapter)
