import json

import pytest

from customsource.exceptions import ConfigValidationError
from customsource.models import ContentSelectors, MangaListSelectors, ScrapingConfig, SourceSelectors
from customsource.validator import validate_config


def errors_for(config):
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_config(config)
    return exc_info.value.errors


def test_complete_config_is_valid(novel_config):
    assert validate_config(novel_config) is novel_config


def test_local_config_requires_templates_and_groups():
    errors = errors_for(ScrapingConfig(name='X', base_url='https://x.com'))

    assert 'popularUrlTemplate is required' in errors
    assert 'searchUrlTemplate is required' in errors
    for group in ('popular', 'details', 'chapters', 'content'):
        assert f'selectors.{group} is required' in errors


def test_delegated_config_needs_identity_and_popular_template():
    config = ScrapingConfig(
        name='Mirror',
        base_url='https://mirror.example',
        popular_url_template='{baseUrl}/{page}',
        based_on_external_source_id=9,
    )
    assert validate_config(config) is config


def test_delegated_config_without_popular_template_rejected():
    errors = errors_for(ScrapingConfig(name='Mirror', base_url='https://m.example', based_on_external_source_id=9))

    assert errors == ['popularUrlTemplate is required']


def test_identity_fields_checked():
    errors = errors_for(ScrapingConfig(name=' ', base_url='ftp://x.com', based_on_external_source_id=1))

    assert 'name must not be blank' in errors
    assert 'baseUrl must start with http:// or https://' in errors


def test_blank_selectors_rejected(novel_config):
    selectors = novel_config.selectors.model_copy(
        update={
            'search': MangaListSelectors(list='div.result', title=''),
            'content': ContentSelectors(primary='#c', fallbacks=['.ok', '  ']),
        }
    )
    errors = errors_for(novel_config.model_copy(update={'selectors': selectors}))

    assert 'selectors.search.title must not be blank' in errors
    assert 'selectors.content.fallbacks must not be blank' in errors


def test_novel_id_pattern_needs_a_capture_group(novel_config):
    assert 'novelIdUrlPattern needs one capture group' in errors_for(
        novel_config.model_copy(update={'novel_id_url_pattern': r'/novel/\w+'})
    )
    assert any(
        'not a valid regex' in error
        for error in errors_for(novel_config.model_copy(update={'novel_id_url_pattern': r'/novel/(\w+'}))
    )


def test_blank_novel_id_selector_rejected(novel_config):
    errors = errors_for(novel_config.model_copy(update={'novel_id_selector': ''}))
    assert 'novel_id_selector must not be blank' in errors


def test_every_problem_reported_at_once():
    config = ScrapingConfig(
        name='',
        base_url='https://x.com',
        popular_url_template='{baseUrl}/{page}',
        selectors=SourceSelectors(popular=MangaListSelectors(list='')),
    )
    errors = errors_for(config)

    assert len(errors) >= 5
    assert 'selectors.popular.list must not be blank' in errors


def test_malformed_selectors_rejected(novel_config):
    selectors = novel_config.selectors.model_copy(
        update={
            'popular': MangaListSelectors(list='div.novel-item >>> a'),
            'content': ContentSelectors(primary='#chapter-content', remove_selectors=['[data-ad']),
        }
    )
    errors = errors_for(novel_config.model_copy(update={'selectors': selectors, 'novel_id_selector': 'div >'}))

    assert any(error.startswith('selectors.popular.list is not a valid selector') for error in errors)
    assert any(error.startswith('selectors.content.remove_selectors is not a valid selector') for error in errors)
    assert any(error.startswith('novel_id_selector is not a valid selector') for error in errors)


def test_malformed_selector_rejected_on_import(novel_config):
    data = json.loads(novel_config.to_json())
    data['selectors']['popular']['list'] = 'div.novel-item >>> a'

    with pytest.raises(ConfigValidationError):
        ScrapingConfig.from_json(json.dumps(data))
