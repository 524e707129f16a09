import pytest

from customsource.core.document import Document
from customsource.core.extraction import ChapterListExtractor
from customsource.exceptions import FetchError
from customsource.models import ChapterSelectors, ScrapingConfig

BASE_URL = 'https://x.com'

CHAPTERS_HTML = """
<ul class="chapters">
  <li><a href="/n/1/3">Chapter 3</a><span class="date">2024-01-03</span></li>
  <li><a href="/n/1/2"><span class="name">The Middle</span></a><span class="date">2024-01-02</span></li>
  <li><span>no link</span></li>
  <li><a href="/n/1/1"></a></li>
  <li><a href="/n/1/0">Prologue</a><span class="date">sometime</span></li>
</ul>
"""


def make_config(**kwargs):
    return ScrapingConfig(name='X', base_url=BASE_URL, **kwargs)


@pytest.fixture
def selectors():
    return ChapterSelectors(list='ul.chapters li', name='.name', date='.date')


def test_extracts_in_page_order_and_drops_malformed_nodes(selectors):
    chapters = ChapterListExtractor().extract(Document(CHAPTERS_HTML, BASE_URL), selectors, BASE_URL, make_config())

    assert [c.name for c in chapters] == ['Chapter 3', 'The Middle', 'Prologue']
    assert [c.url for c in chapters] == ['/n/1/3', '/n/1/2', '/n/1/0']
    assert chapters[0].upload_timestamp == 1704240000000
    assert chapters[2].upload_timestamp == 0


def test_reversal_is_literal_reverse_of_unreversed_output(selectors):
    extractor = ChapterListExtractor()
    forward = extractor.extract(Document(CHAPTERS_HTML, BASE_URL), selectors, BASE_URL, make_config())
    reversed_ = extractor.extract(
        Document(CHAPTERS_HTML, BASE_URL), selectors, BASE_URL, make_config(reverse_chapter_order=True)
    )

    assert reversed_ == list(reversed(forward))


def test_ajax_list_uses_id_from_selector(selectors, mocker):
    page = Document('<div id="manga" data-id="4242"></div>', f'{BASE_URL}/n/slug')
    ajax = Document(CHAPTERS_HTML, f'{BASE_URL}/ajax/4242/')
    fetch = mocker.Mock(return_value=ajax)
    config = make_config(
        chapter_list_ajax_template='{baseUrl}/ajax/{novelId}/',
        novel_id_selector='#manga',
        novel_id_attribute='data-id',
        reverse_chapter_order=True,
    )

    chapters = ChapterListExtractor().extract(page, selectors, BASE_URL, config, fetch=fetch)

    fetch.assert_called_once_with('https://x.com/ajax/4242/')
    assert [c.name for c in chapters] == ['Prologue', 'The Middle', 'Chapter 3']


def test_ajax_id_falls_back_to_url_pattern(selectors, mocker):
    page = Document('<div id="manga"></div>', f'{BASE_URL}/novel/my-novel-77')
    fetch = mocker.Mock(return_value=Document(CHAPTERS_HTML, BASE_URL))
    config = make_config(
        chapter_list_ajax_template='{baseUrl}/novel/{novelId}/ajax/chapters/',
        novel_id_selector='#manga',
        novel_id_attribute='data-id',
        novel_id_url_pattern=r'/novel/([^/]+)',
    )

    ChapterListExtractor().extract(page, selectors, BASE_URL, config, fetch=fetch)

    fetch.assert_called_once_with('https://x.com/novel/my-novel-77/ajax/chapters/')


def test_ajax_id_from_element_text(mocker):
    page = Document('<span class="nid"> 99 </span>', BASE_URL)
    config = make_config(chapter_list_ajax_template='{baseUrl}/c?id={novelId}', novel_id_selector='.nid')

    assert ChapterListExtractor().extract_novel_id(page, config) == '99'


def test_without_id_parses_original_document(selectors, mocker):
    fetch = mocker.Mock()
    config = make_config(chapter_list_ajax_template='{baseUrl}/ajax/{novelId}', novel_id_selector='#missing')

    chapters = ChapterListExtractor().extract(Document(CHAPTERS_HTML, BASE_URL), selectors, BASE_URL, config, fetch)

    fetch.assert_not_called()
    assert len(chapters) == 3


def test_ajax_fetch_error_propagates(selectors, mocker):
    fetch = mocker.Mock(side_effect=FetchError('https://x.com/ajax/1', 'HTTP 500', 500))
    page = Document('<i data-id="1"></i>', BASE_URL)
    config = make_config(
        chapter_list_ajax_template='{baseUrl}/ajax/{novelId}', novel_id_selector='i', novel_id_attribute='data-id'
    )

    with pytest.raises(FetchError):
        ChapterListExtractor().extract(page, selectors, BASE_URL, config, fetch=fetch)



def test_link_title_attribute_does_not_name_a_chapter(selectors):
    html = '<ul class="chapters"><li><a href="/n/1/9" title="Hidden Name"></a></li></ul>'
    chapters = ChapterListExtractor().extract(Document(html, BASE_URL), selectors, BASE_URL, make_config())

    assert chapters == []
