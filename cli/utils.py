import click
from datetime import date
from typing import Optional
from reader_sync.config import Settings
from reader_sync.sa.database import Database
from reader_sync.sa.models import Book
from reader_sync.sync.engine import SyncResult
from reader_sync.utils.dates import format_day, parse_day

def get_settings() -> Settings:
    """Settings attached to the root command, or from the environment outside a CLI run"""
    ctx = click.get_current_context(silent=True)
    if ctx is not None and isinstance(ctx.find_root().obj, Settings):
        return ctx.find_root().obj
    return Settings.from_env()

def get_database() -> Database:
    """Open the configured database, creating missing tables"""
    db = Database(get_settings().database_url)
    db.init_db()
    return db

def parse_date_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[date]:
    """Click callback turning a YYYY-MM-DD option into a date"""
    if value is None:
        return None
    try:
        return parse_day(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}")

def print_sync_result(result: SyncResult, item_type: str = 'rows', verbose: bool = False) -> None:
    """Print the results of a sync operation"""
    if not result.completed:
        click.echo(click.style("A sync of this kind is already in progress. Skipping.", fg='yellow'))
        return

    click.echo("\n" + click.style("Results:", fg='blue'))
    click.echo(click.style("Processed: ", fg='blue') +
              click.style(str(result.processed), fg='cyan') +
              click.style(f" {item_type}", fg='blue'))
    click.echo(click.style("Imported: ", fg='blue') +
              click.style(str(result.inserted), fg='green') +
              click.style(" books", fg='blue'))
    click.echo(click.style("Updated: ", fg='blue') +
              click.style(str(result.updated), fg='green') +
              click.style(" books", fg='blue'))
    if result.collection_date is not None:
        click.echo(click.style("Linked: ", fg='blue') +
                  click.style(str(result.linked), fg='green') +
                  click.style(f" books to {format_day(result.collection_date)}", fg='blue'))

    if verbose:
        click.echo(click.style(f"\nSkipped {result.skipped} {item_type}", fg='yellow'))
        click.echo(click.style(f"No longer eligible: {result.ineligible}", fg='yellow'))
    elif result.skipped or result.ineligible:
        click.echo(click.style(f"\nSkipped {result.skipped + result.ineligible} {item_type}. ", fg='yellow') +
                  click.style("Use --verbose to see details.", fg='blue'))

def print_book_line(book: Book) -> None:
    click.echo(click.style(f"{book.id:>8} ", fg='cyan') +
              f"{book.display_title} " +
              click.style(f"({book.author}) ", fg='blue') +
              book.language_tag)
