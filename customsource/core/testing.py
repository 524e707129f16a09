"""Self-test harness that exercises a configuration against the live site."""

import logging

import logfire
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from customsource.core.delegation import SourceRegistry
from customsource.core.fetcher import HTMLFetcher
from customsource.core.source import CustomSource
from customsource.models import ChapterItem, MangaItem, ScrapingConfig, StepResult, TestReport

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


class SourceTester:
    """Runs popular, details, chapters and content in sequence.

    Each step feeds the next one: the first popular item is opened for
    details and chapters, and the first chapter for content. A step whose
    input is missing is recorded as skipped. A step that raises is recorded
    as failed with the error message, and later steps still run when an
    earlier step gave them what they need.

    Attributes:
        fetcher: Fetcher shared by every source under test, or None for the source default
        registry: Base sources for delegated configurations
        console: Rich console used by print_report

    """

    def __init__(
        self,
        fetcher: HTMLFetcher | None = None,
        console: Console | None = None,
        registry: SourceRegistry | None = None,
    ):
        """Initialize the tester.

        Args:
            fetcher: Fetcher to use for every request
            console: Console for print_report
            registry: Registry used to resolve base sources

        """
        self.fetcher = fetcher
        self.registry = registry
        self.console = console or Console()

    def run_test(self, config: ScrapingConfig) -> TestReport:
        """Run every step for ``config`` and collect the results.

        Args:
            config: Configuration to exercise

        Returns:
            Report with one entry per step, in execution order.

        """
        source = CustomSource(config, fetcher=self.fetcher, registry=self.registry)
        report = TestReport(source_name=config.name)

        with logfire.span('run_test', source=config.name):
            manga = self._step(report, 'popular', lambda: self._test_popular(source))
            if manga is None:
                self._skip(report, 'details', 'No popular item to open')
                self._skip(report, 'chapters', 'No popular item to open')
                self._skip(report, 'content', 'No chapter to open')
                return self._finish(report)

            self._step(report, 'details', lambda: self._test_details(source, manga))
            chapter = self._step(report, 'chapters', lambda: self._test_chapters(source, manga))
            if chapter is None:
                self._skip(report, 'content', 'No chapter to open')
            else:
                self._step(report, 'content', lambda: self._test_content(source, chapter))

            return self._finish(report)

    def _step(self, report: TestReport, name: str, run):
        """Run one step, record its result and return its output for the next step."""
        try:
            result, output = run()
        except Exception as e:
            logger.debug(f'Step {name} raised: {e}', exc_info=True)
            result, output = StepResult(step_name=name, success=False, message=f'Error: {e}'), None
        report.steps.append(result)
        return output if result.success else None

    def _skip(self, report: TestReport, name: str, reason: str) -> None:
        report.steps.append(StepResult(step_name=name, success=False, skipped=True, message=f'Skipped: {reason}'))

    def _finish(self, report: TestReport) -> TestReport:
        if report.overall_success:
            logfire.info('Self-test passed', source=report.source_name)
        else:
            failed = [step.step_name for step in report.executed_steps if not step.success]
            logfire.warn('Self-test failed', source=report.source_name, failed_steps=failed)
        return report

    def _test_popular(self, source: CustomSource) -> tuple[StepResult, MangaItem | None]:
        page = source.get_popular(1)
        count = len(page.items)
        data = {'count': str(count), 'has_next_page': str(page.has_next_page).lower()}
        if not count:
            return StepResult(
                step_name='popular', message='No items found - check the list selector', data=data
            ), None

        first = page.items[0]
        data.update({'first_title': first.title, 'first_url': first.url})
        return StepResult(step_name='popular', success=True, message=f'Found {count} items', data=data), first

    def _test_details(self, source: CustomSource, manga: MangaItem) -> tuple[StepResult, None]:
        details = source.get_details(manga)
        data = {
            'title': details.title,
            'author': details.author or '',
            'status': details.status.name,
            'genres': str(len(details.genres)),
        }
        if not details.title.strip():
            return StepResult(step_name='details', message='No title found - check the title selector', data=data), None
        return StepResult(step_name='details', success=True, message=f'Title: {details.title}', data=data), None

    def _test_chapters(self, source: CustomSource, manga: MangaItem) -> tuple[StepResult, ChapterItem | None]:
        chapters = source.get_chapter_list(manga)
        count = len(chapters)
        data = {'count': str(count)}
        if not count:
            return StepResult(
                step_name='chapters', message='No chapters found - check the chapter list selector', data=data
            ), None

        first = chapters[0]
        data.update({'first_name': first.name, 'first_url': first.url})
        return StepResult(step_name='chapters', success=True, message=f'Found {count} chapters', data=data), first

    def _test_content(self, source: CustomSource, chapter: ChapterItem) -> tuple[StepResult, None]:
        content = source.fetch_content(chapter)
        data = {'length': str(len(content)), 'preview': content[:PREVIEW_LENGTH]}
        if not content.strip():
            return StepResult(
                step_name='content', message='No content found - check the content selectors', data=data
            ), None
        return StepResult(step_name='content', success=True, message=f'Extracted {len(content):,} chars', data=data), None

    def print_report(self, report: TestReport) -> None:
        """Render ``report`` as a table on the console."""
        table = Table(title=f'Self-test: {report.source_name}')
        table.add_column('Step', style='cyan')
        table.add_column('Result')
        table.add_column('Message')

        for step in report.steps:
            if step.skipped:
                outcome = '[magenta]SKIPPED[/magenta]'
            elif step.success:
                outcome = '[bold green]PASS[/bold green]'
            else:
                outcome = '[bold red]FAIL[/bold red]'
            table.add_row(step.step_name, outcome, escape(step.message))

        self.console.print(table)
        if report.overall_success:
            self.console.print('[bold green]✓ All executed steps passed[/bold green]')
        else:
            self.console.print('[bold red]✗ Self-test failed[/bold red]')
