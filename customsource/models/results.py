"""Pydantic models for fetch, extraction and self-test results."""

from dataclasses import dataclass, field
from enum import IntEnum

from pydantic import BaseModel, Field

from customsource.exceptions import FetchError


@dataclass
class ContentMetadata:
    """Metadata about the fetched content.

    Attributes:
        requires_js: True if the page looks rendered client-side
        content_type: 'html' or 'json'
        js_framework: If it needs JS, which framework was detected
        content_length: Length of the body

    """

    requires_js: bool = False
    content_type: str = 'html'
    js_framework: str | None = None
    content_length: int = 0


@dataclass
class FetchResult:
    """Result of an HTML fetch operation.

    Attributes:
        url: Final URL the body was fetched from
        html: Body of the response
        status_code: HTTP status code
        is_blocked: True if the site blocked the request
        block_reason: Why the request failed or was blocked
        fetch_time: Total time for the request in seconds

    """

    url: str
    html: str | None = None
    status_code: int | None = None
    is_blocked: bool = False
    block_reason: str | None = None
    fetch_time: float = 0.0

    metadata: ContentMetadata = field(default_factory=ContentMetadata)

    @property
    def success(self) -> bool:
        """Whether the fetch was successful."""
        return self.html is not None and not self.is_blocked

    def require_html(self) -> str:
        """Return the body or raise if the fetch failed.

        Returns:
            The fetched body

        Raises:
            FetchError: If the fetch was unsuccessful

        """
        if not self.success or self.html is None:
            raise FetchError(self.url, self.block_reason, self.status_code)
        return self.html


class MangaStatus(IntEnum):
    """Publication status of a work, with the catalog's integer codes."""

    UNKNOWN = 0
    ONGOING = 1
    COMPLETED = 2
    LICENSED = 3
    PUBLISHING_FINISHED = 4
    CANCELLED = 5
    ON_HIATUS = 6


class MangaItem(BaseModel):
    """One entry of a listing page.

    Attributes:
        url: Work URL with the source base URL stripped
        title: Work title
        cover_url: Cover image URL, if any

    """

    url: str
    title: str
    cover_url: str | None = None


class MangasPage(BaseModel):
    """A page of listing results."""

    items: list[MangaItem] = Field(default_factory=list)
    has_next_page: bool = False


class DetailRecord(BaseModel):
    """Metadata for a single work."""

    url: str = ''
    title: str = ''
    author: str | None = None
    artist: str | None = None
    description: str | None = None
    genre: str | None = None
    status: MangaStatus = MangaStatus.UNKNOWN
    cover_url: str | None = None

    @property
    def genres(self) -> list[str]:
        """Genre text split on commas."""
        if not self.genre:
            return []
        return [g.strip() for g in self.genre.split(',') if g.strip()]


class ChapterItem(BaseModel):
    """One chapter stub of a chapter list.

    Attributes:
        url: Chapter URL with the source base URL stripped
        name: Chapter name
        upload_timestamp: Upload time in epoch milliseconds, 0 when unknown

    """

    url: str
    name: str
    upload_timestamp: int = 0


class StepResult(BaseModel):
    """Outcome of one self-test step.

    Attributes:
        step_name: 'popular', 'details', 'chapters' or 'content'
        success: Whether the step passed
        message: Human-readable diagnosis
        data: Diagnostic key/value pairs
        skipped: True when a prerequisite step produced no input

    """

    step_name: str
    success: bool = False
    message: str = ''
    data: dict[str, str] = Field(default_factory=dict)
    skipped: bool = False


class TestReport(BaseModel):
    """Complete self-test report for one source."""

    __test__ = False

    source_name: str
    steps: list[StepResult] = Field(default_factory=list)

    @property
    def executed_steps(self) -> list[StepResult]:
        """Steps that actually ran."""
        return [step for step in self.steps if not step.skipped]

    @property
    def overall_success(self) -> bool:
        """True if at least one step ran and every step that ran passed."""
        executed = self.executed_steps
        return bool(executed) and all(step.success for step in executed)

    def get_step(self, step_name: str) -> StepResult | None:
        """Look up a step by name."""
        return next((step for step in self.steps if step.step_name == step_name), None)
