"""Custom source runtime: a scraping configuration driven against live pages.

``CustomSource`` is the public entry point. It picks one of two strategies
the first time it is used: ``DelegatingStrategy`` when the configuration is
based on a resolvable source, ``LocalSelectorStrategy`` otherwise.
"""

import logging
from typing import Any
from urllib.parse import parse_qsl, urlsplit, urlunsplit

import logfire

from customsource.core.delegation import DelegatingStrategy, SourceRegistry, resolve_delegate
from customsource.core.document import Document, to_absolute_url
from customsource.core.extraction import ChapterListExtractor, ContentExtractor, DetailExtractor, ListExtractor
from customsource.core.fetcher import HTMLFetcher, create_fetcher
from customsource.core.templating import build_list_url, build_search_url
from customsource.models import ChapterItem, DetailRecord, MangaItem, MangasPage, ScrapingConfig

logger = logging.getLogger(__name__)


class LocalSelectorStrategy:
    """Runs the configuration's own templates and selectors.

    An absent template or selector group means there is nothing to
    extract, not an error. Fetch failures propagate as ``FetchError``.

    Attributes:
        config: Configuration snapshot used for every call
        fetcher: Fetcher used for every request

    """

    def __init__(
        self,
        config: ScrapingConfig,
        fetcher: HTMLFetcher,
        chapter_extractor: ChapterListExtractor | None = None,
    ):
        """Initialize the strategy.

        Args:
            config: Source configuration
            fetcher: Fetcher for every request
            chapter_extractor: Chapter extractor, a default one if None

        """
        self.config = config
        self.fetcher = fetcher
        self.list_extractor = ListExtractor()
        self.detail_extractor = DetailExtractor()
        self.chapter_extractor = chapter_extractor or ChapterListExtractor()
        self.content_extractor = ContentExtractor()

    @property
    def base_url(self) -> str:
        """Source base URL."""
        return self.config.base_url

    def fetch_document(self, url: str) -> Document:
        """GET ``url`` with the source headers and parse it.

        Raises:
            FetchError: If the request failed

        """
        result = self.fetcher.fetch(url, headers=self.config.headers)
        return Document(result.require_html(), result.url or url)

    def post_document(self, url: str) -> Document:
        """POST the query string of ``url`` as a form to its path and parse the response.

        Raises:
            FetchError: If the request failed

        """
        parts = urlsplit(url)
        form = dict(parse_qsl(parts.query, keep_blank_values=True))
        target = urlunsplit((parts.scheme, parts.netloc, parts.path, '', ''))
        result = self.fetcher.post(target, data=form, headers=self.config.headers)
        return Document(result.require_html(), result.url or target)

    def get_popular(self, page: int) -> MangasPage:
        """Popular listing for ``page``."""
        selectors = self.config.selectors.popular
        if not self.config.popular_url_template or selectors is None:
            return MangasPage()
        url = build_list_url(self.config.popular_url_template, self.base_url, page)
        return self.list_extractor.extract(self.fetch_document(url), selectors, self.base_url)

    def get_latest(self, page: int) -> MangasPage:
        """Latest listing for ``page``, parsed with the popular selectors."""
        template = self.config.latest_url_template or self.config.popular_url_template
        selectors = self.config.selectors.popular
        if not template or selectors is None:
            return MangasPage()
        url = build_list_url(template, self.base_url, page)
        return self.list_extractor.extract(self.fetch_document(url), selectors, self.base_url)

    def search(self, page: int, query: str, filters: list[Any] | None = None) -> MangasPage:
        """Search results for ``query``, parsed with the search or popular selectors."""
        selectors = self.config.selectors.search or self.config.selectors.popular
        if not self.config.search_url_template or selectors is None:
            return MangasPage()
        url = build_search_url(self.config.search_url_template, self.base_url, query, page)
        document = self.post_document(url) if self.config.uses_post_for_search else self.fetch_document(url)
        return self.list_extractor.extract(document, selectors, self.base_url)

    def get_details(self, manga: MangaItem) -> DetailRecord:
        """Details of ``manga``."""
        selectors = self.config.selectors.details
        if selectors is None:
            return DetailRecord(url=manga.url, title=manga.title)
        document = self.fetch_document(to_absolute_url(manga.url, self.base_url))
        details = self.detail_extractor.extract(document, selectors, self.base_url)
        return details.model_copy(update={'url': manga.url})

    def get_chapter_list(self, manga: MangaItem) -> list[ChapterItem]:
        """Chapters of ``manga``, fetching the AJAX list when configured."""
        selectors = self.config.selectors.chapters
        if selectors is None:
            return []
        document = self.fetch_document(to_absolute_url(manga.url, self.base_url))
        return self.chapter_extractor.extract(
            document, selectors, self.base_url, self.config, fetch=self.fetch_document
        )

    def get_filters(self) -> list[Any]:
        """Custom sources have no filters."""
        return []

    def fetch_content(self, chapter: ChapterItem) -> str:
        """Reader-ready markup of ``chapter``."""
        selectors = self.config.selectors.content
        if selectors is None or not selectors.primary.strip():
            return ''
        document = self.fetch_document(to_absolute_url(chapter.url, self.base_url))
        return self.content_extractor.extract(document, selectors, self.base_url)


class CustomSource:
    """A catalog source defined by a scraping configuration.

    Exposes the same operations as the sources it can delegate to, so a
    custom source can itself be registered and used as a base source.

    Attributes:
        config: Configuration snapshot, never mutated
        fetcher: Fetcher for every request
        registry: Where base sources are looked up

    """

    def __init__(
        self,
        config: ScrapingConfig,
        fetcher: HTMLFetcher | None = None,
        registry: SourceRegistry | None = None,
    ):
        """Create a source from a configuration.

        Args:
            config: Source configuration
            fetcher: Fetcher to use. Defaults to 'smart' when Cloudflare bypass is on, 'simple' otherwise.
            registry: Registry of base sources for delegated configurations

        """
        self.config = config
        self.fetcher = fetcher or create_fetcher('smart' if config.use_cloudflare_bypass else 'simple')
        self.registry = registry
        self._strategy: DelegatingStrategy | LocalSelectorStrategy | None = None

    @classmethod
    def from_json(
        cls, data: str | bytes, fetcher: HTMLFetcher | None = None, registry: SourceRegistry | None = None
    ) -> 'CustomSource':
        """Create a source from an exported configuration."""
        return cls(ScrapingConfig.from_json(data), fetcher=fetcher, registry=registry)

    @property
    def name(self) -> str:
        """Source name."""
        return self.config.name

    @property
    def base_url(self) -> str:
        """Source base URL."""
        return self.config.base_url

    @property
    def lang(self) -> str:
        """Source language."""
        return self.config.language

    @property
    def id(self) -> int:
        """Source id, explicit or derived from name and base URL."""
        return self.config.source_id

    @property
    def supports_latest(self) -> bool:
        """True when the configuration has a latest listing."""
        return self.config.supports_latest

    @property
    def is_novel_source(self) -> bool:
        """True when chapters are text rather than images."""
        return self.config.is_novel_content

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return dict(self.config.headers)

    @property
    def strategy(self) -> DelegatingStrategy | LocalSelectorStrategy:
        """The strategy serving this source, chosen on first use."""
        if self._strategy is None:
            delegate = resolve_delegate(self.config, self.registry)
            if delegate is not None:
                logger.info(f'{self.name}: delegating to base source {self.config.based_on_external_source_id}')
                self._strategy = DelegatingStrategy(delegate)
            else:
                if self.config.is_delegated:
                    logger.debug(f'{self.name}: base source unavailable, using local selectors')
                self._strategy = LocalSelectorStrategy(self.config, self.fetcher)
        return self._strategy

    @property
    def is_delegating(self) -> bool:
        """True when operations are forwarded to a base source."""
        return isinstance(self.strategy, DelegatingStrategy)

    def get_popular(self, page: int = 1) -> MangasPage:
        """Popular listing for ``page``."""
        with logfire.span('get_popular', source=self.name, page=page):
            return self.strategy.get_popular(page)

    def get_latest(self, page: int = 1) -> MangasPage:
        """Latest listing for ``page``."""
        with logfire.span('get_latest', source=self.name, page=page):
            return self.strategy.get_latest(page)

    def search(self, page: int, query: str, filters: list[Any] | None = None) -> MangasPage:
        """Search results for ``query``."""
        with logfire.span('search', source=self.name, page=page, query=query):
            return self.strategy.search(page, query, filters)

    def get_details(self, manga: MangaItem) -> DetailRecord:
        """Details of ``manga``."""
        with logfire.span('get_details', source=self.name, url=manga.url):
            return self.strategy.get_details(manga)

    def get_chapter_list(self, manga: MangaItem) -> list[ChapterItem]:
        """Chapters of ``manga``."""
        with logfire.span('get_chapter_list', source=self.name, url=manga.url):
            return self.strategy.get_chapter_list(manga)

    def get_filters(self) -> list[Any]:
        """Filters supported by the source."""
        return self.strategy.get_filters()

    def fetch_content(self, chapter: ChapterItem) -> str:
        """Reader-ready markup of ``chapter``."""
        with logfire.span('fetch_content', source=self.name, url=chapter.url):
            return self.strategy.fetch_content(chapter)

    def __repr__(self) -> str:
        """Return a short description for debugging."""
        return f'CustomSource({self.name!r}, id={self.id})'
