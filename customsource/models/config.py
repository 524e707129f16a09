"""Pydantic models for a custom source scraping configuration.

Field names on the wire are camelCase; Python attributes are snake_case.
Configurations are frozen: an edit produces a new object, never a mutation.
"""

import hashlib

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from customsource.exceptions import ConfigValidationError


def _legacy(name: str, legacy: str, python_name: str) -> AliasChoices:
    """Accept the canonical name, the older app export name and the attribute name."""
    return AliasChoices(name, legacy, python_name)


class _SelectorModel(BaseModel):
    """Shared model configuration for every configuration record."""

    model_config = ConfigDict(
        frozen=True,
        extra='ignore',
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MangaListSelectors(_SelectorModel):
    """Selectors for a listing page (popular, latest, search results).

    Attributes:
        list: Container selector matching one node per listed work
        link: Selector for the work link inside a container
        title: Selector for the work title inside a container
        cover: Selector for the cover image inside a container
        next_page: Selector whose presence means another page exists

    """

    list: str = Field(description='Container selector, one match per item')
    link: str | None = None
    title: str | None = None
    cover: str | None = None
    next_page: str | None = None


class DetailSelectors(_SelectorModel):
    """Selectors for a single work's detail page."""

    title: str
    author: str | None = None
    artist: str | None = None
    description: str | None = None
    genre: str | None = None
    status: str | None = None
    cover: str | None = None


class ChapterSelectors(_SelectorModel):
    """Selectors for the chapter list of a work."""

    list: str
    link: str | None = None
    name: str | None = None
    date: str | None = None


class ContentSelectors(_SelectorModel):
    """Selectors for chapter text.

    Attributes:
        primary: Selector tried first
        fallbacks: Selectors tried in order when primary matches nothing
        remove_selectors: Selectors whose matches are deleted before serialization

    """

    primary: str
    fallbacks: list[str] = Field(default_factory=list)
    remove_selectors: list[str] = Field(default_factory=list)


class SourceSelectors(_SelectorModel):
    """All selector groups of a configuration.

    Every group is optional here; which ones are required depends on whether
    the configuration delegates to another source (see ``validate_config``).
    """

    popular: MangaListSelectors | None = None
    search: MangaListSelectors | None = None
    details: DetailSelectors | None = None
    chapters: ChapterSelectors | None = None
    content: ContentSelectors | None = None


def generate_source_id(name: str, base_url: str) -> int:
    """Derive a stable, non-negative id from a source name and base URL.

    Args:
        name: Source name
        base_url: Source base URL

    Returns:
        Integer in the range [0, 2**31 - 1]

    """
    digest = hashlib.sha256(f'{name}{base_url}'.encode()).digest()
    return int.from_bytes(digest[:8], 'big') & 0x7FFFFFFF


class ScrapingConfig(_SelectorModel):
    """Complete declarative description of how to scrape one site.

    Attributes:
        name: Display name of the source
        base_url: Site root, prepended to relative URLs
        language: Language code of the source
        id: Explicit source id, derived from name and base URL when unset
        use_cloudflare_bypass: Fetch through a real browser when blocked
        reverse_chapter_order: Reverse the extracted chapter list once
        uses_post_for_search: Send search as a form POST instead of a GET
        is_novel_content: Chapters are text (True) or images (False)
        based_on_external_source_id: Delegate every operation to this source
        popular_url_template: Template for the popular listing
        latest_url_template: Template for the latest listing, popular if unset
        search_url_template: Template for search results
        headers: Extra request headers sent with every request
        chapter_list_ajax_template: Template for the AJAX chapter list
        novel_id_selector: Where to scrape the id used by the AJAX template
        novel_id_attribute: Attribute holding the id, element text if unset
        novel_id_url_pattern: Regex with one group applied to the page URL
        selectors: Selector groups per page type

    """

    name: str
    base_url: str
    language: str = 'en'
    id: int | None = None
    use_cloudflare_bypass: bool = Field(
        default=True,
        alias='useCloudflareBypass',
        validation_alias=_legacy('useCloudflareBypass', 'useCloudflare', 'use_cloudflare_bypass'),
    )
    reverse_chapter_order: bool = Field(
        default=False,
        alias='reverseChapterOrder',
        validation_alias=_legacy('reverseChapterOrder', 'reverseChapters', 'reverse_chapter_order'),
    )
    uses_post_for_search: bool = Field(
        default=False,
        alias='usesPostForSearch',
        validation_alias=_legacy('usesPostForSearch', 'postSearch', 'uses_post_for_search'),
    )
    is_novel_content: bool = Field(
        default=True,
        alias='isNovelContent',
        validation_alias=_legacy('isNovelContent', 'isNovel', 'is_novel_content'),
    )
    based_on_external_source_id: int | None = Field(
        default=None,
        alias='basedOnExternalSourceId',
        validation_alias=_legacy('basedOnExternalSourceId', 'basedOnSourceId', 'based_on_external_source_id'),
    )
    popular_url_template: str | None = Field(
        default=None,
        alias='popularUrlTemplate',
        validation_alias=_legacy('popularUrlTemplate', 'popularUrl', 'popular_url_template'),
    )
    latest_url_template: str | None = Field(
        default=None,
        alias='latestUrlTemplate',
        validation_alias=_legacy('latestUrlTemplate', 'latestUrl', 'latest_url_template'),
    )
    search_url_template: str | None = Field(
        default=None,
        alias='searchUrlTemplate',
        validation_alias=_legacy('searchUrlTemplate', 'searchUrl', 'search_url_template'),
    )
    headers: dict[str, str] = Field(default_factory=dict)
    chapter_list_ajax_template: str | None = Field(
        default=None,
        alias='chapterListAjaxTemplate',
        validation_alias=_legacy('chapterListAjaxTemplate', 'chapterAjax', 'chapter_list_ajax_template'),
    )
    novel_id_selector: str | None = None
    novel_id_attribute: str | None = Field(
        default=None,
        alias='novelIdAttribute',
        validation_alias=_legacy('novelIdAttribute', 'novelIdAttr', 'novel_id_attribute'),
    )
    novel_id_url_pattern: str | None = Field(
        default=None,
        alias='novelIdUrlPattern',
        validation_alias=_legacy('novelIdUrlPattern', 'novelIdPattern', 'novel_id_url_pattern'),
    )
    selectors: SourceSelectors = Field(default_factory=SourceSelectors)

    @property
    def source_id(self) -> int:
        """Explicit id if set, otherwise the id derived from name and base URL."""
        if self.id is not None:
            return self.id
        return generate_source_id(self.name, self.base_url)

    @property
    def is_delegated(self) -> bool:
        """True when every operation should be forwarded to another source."""
        return self.based_on_external_source_id is not None

    @property
    def supports_latest(self) -> bool:
        """True when the source has its own latest listing."""
        return self.latest_url_template is not None

    def to_json(self, indent: int | None = 2) -> str:
        """Export the configuration as JSON, omitting absent optional fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> 'ScrapingConfig':
        """Import a configuration from JSON and validate it.

        Args:
            data: JSON document as produced by ``to_json``

        Returns:
            The validated configuration

        Raises:
            ConfigValidationError: If the JSON is malformed or a required field is missing

        """
        from pydantic import ValidationError

        from customsource.validator import validate_config

        try:
            config = cls.model_validate_json(data)
        except ValidationError as e:
            errors = [f'{".".join(str(part) for part in err["loc"]) or "document"}: {err["msg"]}' for err in e.errors()]
            raise ConfigValidationError(errors) from e
        return validate_config(config)


def create_blank_config(name: str, base_url: str) -> ScrapingConfig:
    """Create a starter configuration with generic selectors.

    The generic selectors are meant to be replaced, but they let a new source
    pass validation and be saved before it is refined.

    Args:
        name: Source name
        base_url: Site root

    Returns:
        A configuration with generic selectors and templates

    """
    base_url = base_url.rstrip('/')
    return ScrapingConfig(
        name=name,
        base_url=base_url,
        popular_url_template='{baseUrl}/page/{page}',
        search_url_template='{baseUrl}/?s={query}&page={page}',
        selectors=SourceSelectors(
            popular=MangaListSelectors(list='article', link='a', title='h2, h3', cover='img'),
            details=DetailSelectors(title='h1', description='.description, .summary', cover='img'),
            chapters=ChapterSelectors(list='ul.chapters li, .chapter-list li', link='a'),
            content=ContentSelectors(
                primary='div.chapter-content',
                fallbacks=['div.entry-content', 'article'],
                remove_selectors=['script', 'ins', '.ads'],
            ),
        ),
    )
