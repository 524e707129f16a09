from io import StringIO

import pytest
from rich.console import Console

from customsource.core.delegation import SourceRegistry
from customsource.core.testing import PREVIEW_LENGTH, SourceTester
from customsource.models import ChapterItem, DetailRecord, MangaItem, MangaListSelectors, MangasPage, ScrapingConfig


@pytest.fixture
def tester(fake_fetcher):
    return SourceTester(fetcher=fake_fetcher, console=Console(file=StringIO(), width=120))


def test_all_steps_pass(tester, novel_config):
    report = tester.run_test(novel_config)

    assert [step.step_name for step in report.steps] == ['popular', 'details', 'chapters', 'content']
    assert report.overall_success is True
    assert report.get_step('popular').data['count'] == '2'
    assert report.get_step('details').data['title'] == 'Alpha'
    assert report.get_step('chapters').data['first_name'] == 'Chapter 1'
    assert 'It begins.' in report.get_step('content').data['preview']


def test_empty_popular_skips_dependent_steps(tester, novel_config, fake_fetcher):
    selectors = novel_config.selectors.model_copy(update={'popular': MangaListSelectors(list='.nothing-here')})
    report = tester.run_test(novel_config.model_copy(update={'selectors': selectors}))

    popular = report.get_step('popular')
    assert popular.success is False
    assert 'check the list selector' in popular.message
    assert all(report.get_step(name).skipped for name in ('details', 'chapters', 'content'))
    assert report.overall_success is False
    assert fake_fetcher.fetch.call_count == 1


def test_failed_step_does_not_stop_independent_steps(tester, novel_config, site_pages, details_html):
    site_pages['https://novels.example/novel/alpha'] = details_html.replace('novel-title', 'renamed')
    report = tester.run_test(novel_config)

    assert report.get_step('details').success is False
    assert report.get_step('chapters').success is True
    assert report.get_step('content').success is True
    assert report.overall_success is False


def test_fetch_error_recorded_as_failure(tester, novel_config, site_pages):
    del site_pages['https://novels.example/novel/alpha/1']
    report = tester.run_test(novel_config)

    content = report.get_step('content')
    assert content.success is False
    assert content.skipped is False
    assert 'HTTP 404' in content.message


def test_no_chapters_skips_content(tester, novel_config, site_pages):
    site_pages['https://novels.example/novel/alpha'] = '<h1 class="novel-title">Alpha</h1>'
    report = tester.run_test(novel_config)

    assert report.get_step('details').success is True
    assert report.get_step('chapters').success is False
    assert report.get_step('content').skipped is True


def test_content_preview_is_truncated(tester, novel_config, site_pages):
    site_pages['https://novels.example/novel/alpha/1'] = f'<div id="chapter-content">{"x" * 500}</div>'
    content = tester.run_test(novel_config).get_step('content')

    assert content.data['length'] == '500'
    assert len(content.data['preview']) == PREVIEW_LENGTH


def test_delegated_config_is_tested_through_delegate(mocker, fake_fetcher):
    delegate = mocker.Mock(
        spec=['get_popular', 'get_latest', 'search', 'get_details', 'get_chapter_list', 'get_filters']
    )
    delegate.get_popular.return_value = MangasPage(items=[MangaItem(url='/n/1', title='One')])
    delegate.get_details.return_value = DetailRecord(url='/n/1', title='One')
    delegate.get_chapter_list.return_value = [ChapterItem(url='/n/1/1', name='1')]
    config = ScrapingConfig(
        name='Mirror',
        base_url='https://mirror.example',
        popular_url_template='{baseUrl}/{page}',
        based_on_external_source_id=3,
    )

    tester = SourceTester(fetcher=fake_fetcher, registry=SourceRegistry({3: delegate}), console=Console(file=StringIO()))
    report = tester.run_test(config)

    assert report.get_step('popular').success is True
    assert report.get_step('details').success is True
    assert report.get_step('chapters').success is True
    # A delegate without chapter text yields empty content
    assert report.get_step('content').success is False
    fake_fetcher.fetch.assert_not_called()


def test_print_report(novel_config, fake_fetcher):
    output = StringIO()
    tester = SourceTester(fetcher=fake_fetcher, console=Console(file=output, width=120))
    tester.print_report(tester.run_test(novel_config))

    text = output.getvalue()
    assert 'Self-test: Novel Example' in text
    assert 'PASS' in text
    assert 'All executed steps passed' in text
