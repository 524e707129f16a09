import pytest

from customsource.core.document import Document
from customsource.core.extraction import ListExtractor
from customsource.models import MangaListSelectors

BASE_URL = 'https://x.com'


@pytest.fixture
def extractor():
    return ListExtractor()


def test_node_without_link_is_dropped(extractor):
    html = """
    <div class="item"><a href="/n/1">One</a></div>
    <div class="item"><a href="/n/2">Two</a></div>
    <div class="item"><span>Three has no link</span></div>
    <div class="item"><a href="/n/4">Four</a></div>
    <div class="item"><a href="/n/5">Five</a></div>
    """
    page = extractor.extract(Document(html, BASE_URL), MangaListSelectors(list='div.item'), BASE_URL)

    assert [item.title for item in page.items] == ['One', 'Two', 'Four', 'Five']
    assert [item.url for item in page.items] == ['/n/1', '/n/2', '/n/4', '/n/5']


def test_title_resolution_order(extractor):
    html = """
    <div class="item"><a href="/n/1" title="Attr One">Text One</a><h3>Heading One</h3></div>
    <div class="item"><a href="/n/2" title="Attr Two">Text Two</a></div>
    <div class="item"><a href="/n/3">Text Three</a></div>
    <div class="item"><a href="/n/4"><img src="/c.jpg"></a></div>
    """
    selectors = MangaListSelectors(list='div.item', title='h3')
    page = extractor.extract(Document(html, BASE_URL), selectors, BASE_URL)

    assert [item.title for item in page.items] == ['Heading One', 'Attr Two', 'Text Three']


def test_cover_fallback_attributes(extractor):
    html = """
    <div class="item"><a href="/n/1">One</a><img src="/c1.jpg"></div>
    <div class="item"><a href="/n/2">Two</a><img data-src="/c2.jpg"></div>
    <div class="item"><a href="/n/3">Three</a><img data-lazy-src="https://cdn.x.com/c3.jpg"></div>
    <div class="item"><a href="/n/4">Four</a></div>
    """
    selectors = MangaListSelectors(list='div.item', cover='img')
    page = extractor.extract(Document(html, BASE_URL), selectors, BASE_URL)

    assert [item.cover_url for item in page.items] == ['/c1.jpg', '/c2.jpg', 'https://cdn.x.com/c3.jpg', None]


def test_link_selector_falls_back_to_any_anchor(extractor):
    html = '<div class="item"><a href="/n/1">One</a></div>'
    selectors = MangaListSelectors(list='div.item', link='a.missing')
    page = extractor.extract(Document(html, BASE_URL), selectors, BASE_URL)

    assert [item.url for item in page.items] == ['/n/1']


def test_container_that_is_itself_the_link(extractor):
    html = '<a class="card" href="/n/1">One</a><a class="card" href="/n/2">Two</a>'
    page = extractor.extract(Document(html, BASE_URL), MangaListSelectors(list='a.card'), BASE_URL)

    assert [item.url for item in page.items] == ['/n/1', '/n/2']


def test_foreign_hosts_keep_absolute_urls(extractor):
    html = '<div class="item"><a href="https://mirror.net/n/1">One</a></div>'
    page = extractor.extract(Document(html, BASE_URL), MangaListSelectors(list='div.item'), BASE_URL)

    assert page.items[0].url == 'https://mirror.net/n/1'


def test_next_page_selector_presence(extractor):
    html = '<div class="item"><a href="/n/1">One</a></div>'
    selectors = MangaListSelectors(list='div.item', next_page='a.next')

    assert extractor.extract(Document(html, BASE_URL), selectors, BASE_URL).has_next_page is False
    with_next = html + '<a class="next" href="/p/2">Next</a>'
    assert extractor.extract(Document(with_next, BASE_URL), selectors, BASE_URL).has_next_page is True


def test_next_page_heuristic_without_selector(extractor):
    selectors = MangaListSelectors(list='div.item')

    non_empty = Document('<div class="item"><a href="/n/1">One</a></div>', BASE_URL)
    assert extractor.extract(non_empty, selectors, BASE_URL).has_next_page is True

    empty = Document('<p>Nothing here</p>', BASE_URL)
    page = extractor.extract(empty, selectors, BASE_URL)
    assert page.items == []
    assert page.has_next_page is False


def test_node_error_drops_only_that_node(extractor, mocker):
    html = '<div class="item"><a href="/n/1">One</a></div><div class="item"><a href="/n/2">Two</a></div>'
    document = Document(html, BASE_URL)
    original = extractor._extract_item
    calls = iter([RuntimeError('broken node'), None])

    def flaky(*args):
        error = next(calls)
        if error:
            raise error
        return original(*args)

    mocker.patch.object(extractor, '_extract_item', side_effect=flaky)
    page = extractor.extract(document, MangaListSelectors(list='div.item'), BASE_URL)

    assert [item.title for item in page.items] == ['Two']
