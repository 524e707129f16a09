import pytest

from customsource.core.fetcher import HTMLFetcher
from customsource.models import (
    ChapterSelectors,
    ContentSelectors,
    DetailSelectors,
    FetchResult,
    MangaListSelectors,
    ScrapingConfig,
    SourceSelectors,
)

BASE_URL = 'https://novels.example'


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def novel_config():
    return ScrapingConfig(
        name='Novel Example',
        base_url=BASE_URL,
        popular_url_template='{baseUrl}/popular/{page}',
        latest_url_template='{baseUrl}/latest?page={page}',
        search_url_template='{baseUrl}/search?q={query}&page={page}',
        reverse_chapter_order=True,
        use_cloudflare_bypass=False,
        headers={'Referer': BASE_URL},
        selectors=SourceSelectors(
            popular=MangaListSelectors(
                list='div.novel-item', link='a', title='h3.title', cover='img', next_page='a.next'
            ),
            details=DetailSelectors(
                title='h1.novel-title',
                author='.author',
                description='.summary',
                genre='.genres',
                status='.status',
                cover='img.cover',
            ),
            chapters=ChapterSelectors(list='ul.chapters li', link='a', date='.date'),
            content=ContentSelectors(
                primary='#chapter-content',
                fallbacks=['.reading-content'],
                remove_selectors=['script', '.ads'],
            ),
        ),
    )


@pytest.fixture
def popular_html():
    return """
    <html><body>
      <div class="novel-item">
        <a href="/novel/alpha" title="Alpha Title"><img data-src="/covers/alpha.jpg"></a>
        <h3 class="title">Alpha</h3>
      </div>
      <div class="novel-item">
        <a href="https://novels.example/novel/beta">Beta</a>
      </div>
      <div class="novel-item"><span>No link here</span></div>
      <a class="next" href="/popular/2">Next</a>
    </body></html>
    """


@pytest.fixture
def details_html():
    return """
    <html><body>
      <h1 class="novel-title">Alpha</h1>
      <div class="author">Jane Roe</div>
      <div class="genres">Fantasy, Action</div>
      <div class="status">Status: Ongoing</div>
      <div class="summary">A long story.</div>
      <img class="cover" src="/covers/alpha-large.jpg">
      <ul class="chapters">
        <li><a href="/novel/alpha/2">Chapter 2</a><span class="date">2024-01-02</span></li>
        <li><a href="/novel/alpha/1">Chapter 1</a><span class="date">2024-01-01</span></li>
      </ul>
    </body></html>
    """


@pytest.fixture
def chapter_html():
    return """
    <html><body>
      <div id="chapter-content">
        <p>It begins.</p>
        <script>showAds()</script>
        <div class="ads">Buy now</div>
        <img src="/img/map.png">
      </div>
    </body></html>
    """


@pytest.fixture
def site_pages(popular_html, details_html, chapter_html):
    return {
        f'{BASE_URL}/popular': popular_html,
        f'{BASE_URL}/novel/alpha': details_html,
        f'{BASE_URL}/novel/alpha/1': chapter_html,
    }


@pytest.fixture
def fake_fetcher(mocker, site_pages):
    """Fetcher serving ``site_pages`` and answering 404 for anything else."""

    def respond(url, headers=None):
        html = site_pages.get(url)
        if html is None:
            return FetchResult(url=url, status_code=404, block_reason='HTTP 404')
        return FetchResult(url=url, html=html, status_code=200)

    fetcher = mocker.Mock(spec=HTMLFetcher)
    fetcher.fetch.side_effect = respond
    fetcher.post.side_effect = lambda url, data, headers=None: respond(url, headers)
    return fetcher


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""

    for item in items:
        if hasattr(item, 'fspath'):
            file_path = str(item.fspath)

            if '/tests/integration/' in file_path:
                item.add_marker(pytest.mark.integration)
            elif '/tests/unit/' in file_path:
                item.add_marker(pytest.mark.unit)
