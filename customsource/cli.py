"""
cli.py
=======
Command line entry point for testing, running and managing custom sources.
"""

import argparse
import os
import sys

import logfire
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from customsource.core.fetcher import FETCHER_TYPES, HTMLFetcher, create_fetcher
from customsource.core.source import CustomSource
from customsource.core.testing import SourceTester
from customsource.exceptions import ConfigValidationError, CustomSourceError, FetchError
from customsource.models import ChapterItem, MangaItem, MangasPage, ScrapingConfig
from customsource.storage import SourceStorage
from customsource.utils.logging import setup_local_logging

CLI_THEME = Theme(
    {
        'info': 'dim cyan',
        'warning': 'magenta',
        'danger': 'bold red',
        'success': 'bold green',
        'step': 'bold blue',
    }
)

console = Console(theme=CLI_THEME)


def load_config(path: str) -> ScrapingConfig:
    """Read and validate a configuration file.

    Exits with status 1 when the file is missing or invalid.
    """
    if not os.path.exists(path):
        console.print(f'[danger]File not found: {path}[/danger]')
        sys.exit(1)

    with open(path, encoding='utf-8') as f:
        data = f.read()

    try:
        return ScrapingConfig.from_json(data)
    except ConfigValidationError as e:
        console.print(f'[danger]Invalid configuration {path}:[/danger]')
        for error in e.errors:
            console.print(f'  [danger]•[/danger] {escape(error)}')
        sys.exit(1)


def print_page(page: MangasPage, title: str) -> None:
    """Render a listing page as a table."""
    table = Table(title=title)
    table.add_column('#', style='dim')
    table.add_column('Title', style='cyan')
    table.add_column('URL', style='green')
    for idx, item in enumerate(page.items, 1):
        table.add_row(str(idx), escape(item.title), item.url)
    console.print(table)
    console.print(f'[info]{len(page.items)} items, has next page: {page.has_next_page}[/info]')


def print_chapters(chapters: list[ChapterItem]) -> None:
    """Render a chapter list as a table."""
    table = Table(title='Chapters')
    table.add_column('#', style='dim')
    table.add_column('Name', style='cyan')
    table.add_column('URL', style='green')
    table.add_column('Uploaded', style='dim')
    for idx, chapter in enumerate(chapters, 1):
        table.add_row(str(idx), escape(chapter.name), chapter.url, str(chapter.upload_timestamp or '-'))
    console.print(table)


def run_source_command(args: argparse.Namespace, fetcher: HTMLFetcher | None) -> None:
    """Run one catalog operation of a configuration file and print the result."""
    source = CustomSource(load_config(args.config), fetcher=fetcher)
    console.print(Panel(f'{source.name} ({source.base_url})', style='bold blue'))

    if args.command == 'popular':
        print_page(source.get_popular(args.page), f'Popular, page {args.page}')
    elif args.command == 'latest':
        print_page(source.get_latest(args.page), f'Latest, page {args.page}')
    elif args.command == 'search':
        print_page(source.search(args.page, args.query), f'Search "{args.query}", page {args.page}')
    elif args.command == 'details':
        details = source.get_details(MangaItem(url=args.url, title=''))
        table = Table(show_header=False)
        table.add_column('Field', style='cyan')
        table.add_column('Value')
        for field, value in details.model_dump(exclude={'url'}).items():
            table.add_row(field, escape(str(value.name if field == 'status' else value or '')))
        console.print(table)
    elif args.command == 'chapters':
        print_chapters(source.get_chapter_list(MangaItem(url=args.url, title='')))
    elif args.command == 'content':
        content = source.fetch_content(ChapterItem(url=args.url, name=''))
        console.print(content, markup=False, highlight=False)
        console.print(f'[info]{len(content):,} chars[/info]')


def run_storage_command(args: argparse.Namespace) -> None:
    """Import, export or list stored configurations."""
    storage = SourceStorage()

    if args.command == 'import':
        config = load_config(args.config)
        storage.import_source(config.to_json())
        console.print(f'[success]✓ Imported {config.name} as source {config.source_id}[/success]')
    elif args.command == 'export':
        exported = storage.export_source(args.source_id)
        if exported is None:
            console.print(f'[danger]No stored source with id {args.source_id}[/danger]')
            sys.exit(1)
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(exported)
            console.print(f'[success]✓ Exported source {args.source_id} to {args.output}[/success]')
        else:
            console.print(exported, markup=False, highlight=False)
    elif args.command == 'list':
        table = Table(title='Stored Sources')
        table.add_column('ID', style='dim')
        table.add_column('Name', style='cyan')
        table.add_column('Base URL', style='green')
        table.add_column('Mode')
        for config in storage.list_sources():
            mode = f'delegates to {config.based_on_external_source_id}' if config.is_delegated else 'selectors'
            table.add_row(str(config.source_id), config.name, config.base_url, mode)
        console.print(table)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(description='Test and run declarative custom scraping sources')
    parser.add_argument(
        '--fetcher',
        choices=list(FETCHER_TYPES),
        default=os.getenv('CUSTOMSOURCE_FETCHER'),
        help='HTML fetcher to use (default: smart when Cloudflare bypass is on, simple otherwise)',
    )
    parser.add_argument(
        '--log-level',
        default=os.getenv('CUSTOMSOURCE_LOG_LEVEL', 'INFO'),
        help='Level for the log file written to .customsource/logs (default: INFO)',
    )
    parser.add_argument(
        '--console-log-level',
        default=os.getenv('CUSTOMSOURCE_CONSOLE_LOG_LEVEL'),
        help='Also print log records at or above this level to the console (default: off)',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    test = subparsers.add_parser('test', help='Run the self-test against the live site')
    test.add_argument('config', help='Path to a configuration JSON file')

    validate = subparsers.add_parser('validate', help='Validate a configuration file')
    validate.add_argument('config', help='Path to a configuration JSON file')

    for name in ('popular', 'latest'):
        listing = subparsers.add_parser(name, help=f'Show the {name} listing')
        listing.add_argument('config', help='Path to a configuration JSON file')
        listing.add_argument('--page', type=int, default=1, help='Page number (default: 1)')

    search = subparsers.add_parser('search', help='Search the source')
    search.add_argument('config', help='Path to a configuration JSON file')
    search.add_argument('query', help='Search term')
    search.add_argument('--page', type=int, default=1, help='Page number (default: 1)')

    for name, what in (('details', 'work'), ('chapters', 'work'), ('content', 'chapter')):
        page = subparsers.add_parser(name, help=f'Extract {name} from a {what} URL')
        page.add_argument('config', help='Path to a configuration JSON file')
        page.add_argument('url', help=f'{what.capitalize()} URL, absolute or relative to the base URL')

    import_ = subparsers.add_parser('import', help='Store a configuration file')
    import_.add_argument('config', help='Path to a configuration JSON file')

    export = subparsers.add_parser('export', help='Export a stored configuration')
    export.add_argument('source_id', type=int, help='Source id')
    export.add_argument('--output', help='Write to this file instead of the console')

    subparsers.add_parser('list', help='List stored configurations')

    return parser


def main(argv: list[str] | None = None):
    """Main entry point."""
    load_dotenv()

    args = build_parser().parse_args(argv)

    log_file = setup_local_logging(args.log_level, console_level=args.console_log_level, console=console)
    console.print(f'[info]Logging to {log_file}[/info]')

    logfire_token = os.getenv('LOGFIRE_TOKEN')
    if logfire_token:
        logfire.configure(token=logfire_token, service_name='customsource')

    fetcher = create_fetcher(args.fetcher) if args.fetcher else None

    try:
        if args.command == 'validate':
            config = load_config(args.config)
            mode = 'delegated' if config.is_delegated else 'selector-based'
            console.print(f'[success]✓ {config.name} is a valid {mode} source (id {config.source_id})[/success]')
        elif args.command == 'test':
            tester = SourceTester(fetcher=fetcher, console=console)
            report = tester.run_test(load_config(args.config))
            tester.print_report(report)
            if not report.overall_success:
                sys.exit(1)
        elif args.command in ('import', 'export', 'list'):
            run_storage_command(args)
        else:
            run_source_command(args, fetcher)
    except FetchError as e:
        console.print(f'[danger]{escape(str(e))}[/danger]')
        sys.exit(1)
    except CustomSourceError as e:
        console.print(f'[danger]Error: {escape(str(e))}[/danger]')
        sys.exit(1)
    finally:
        if fetcher is not None:
            fetcher.close()


if __name__ == '__main__':
    main()
