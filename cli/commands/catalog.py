import click
from datetime import date
from typing import Optional
from reader_sync.errors import SyncError
from reader_sync.services.catalog_service import CatalogService
from reader_sync.sa.repositories import BookRepository
from ..utils import get_database, get_settings, parse_date_option, print_sync_result

@click.group()
def catalog():
    """Full catalog import commands"""
    pass

@catalog.command(name='import')
@click.option('--url', default=None, help='Catalog CSV URL or path (default: bundled seed catalog)')
@click.option('--remote', is_flag=True, default=False, help='Download the configured Gutenberg catalog')
@click.option('--link-date', default=None, callback=parse_date_option,
              help='Also link every imported book to the collection for this date (YYYY-MM-DD)')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed results')
def import_catalog(url: Optional[str], remote: bool, link_date: Optional[date], verbose: bool):
    """Import books from the Gutenberg CSV catalog

    New English "Text" entries are added; existing books get their catalog
    fields refreshed while reading progress and downloads are kept.

    Example:
        reader-sync catalog import                 # bundled seed catalog
        reader-sync catalog import --remote        # full catalog from gutenberg.org
        reader-sync catalog import --url pg.csv --link-date 2026-02-06
    """
    settings = get_settings()
    source = url or (settings.catalog_url if remote else None)
    if verbose:
        click.echo(click.style("\nImporting catalog from: ", fg='blue') +
                   click.style(source or settings.seed_path, fg='cyan'))

    db = get_database()
    session = db.get_session()
    try:
        service = CatalogService(session, settings=settings)
        result = service.import_catalog(url=source, link_to=link_date)
    except SyncError as e:
        raise click.ClickException(str(e))
    finally:
        session.close()

    print_sync_result(result, item_type='rows', verbose=verbose)

@catalog.command()
def status():
    """Show how many books are stored and whether a full import is needed"""
    db = get_database()
    session = db.get_session()
    try:
        total = BookRepository(session).count()
        needs_import = CatalogService(session, settings=get_settings()).needs_initial_import()
    finally:
        session.close()

    click.echo(click.style("Books stored: ", fg='blue') + click.style(str(total), fg='cyan'))
    if needs_import:
        click.echo(click.style("Catalog not yet imported. Run 'reader-sync catalog import'.", fg='yellow'))
    else:
        click.echo(click.style("Catalog imported.", fg='green'))
