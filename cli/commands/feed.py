import click
from datetime import date
from typing import Optional
from reader_sync.errors import SyncError
from reader_sync.services.feed_service import FeedService
from reader_sync.utils.dates import format_day
from ..utils import get_database, get_settings, parse_date_option, print_sync_result, print_book_line

@click.group()
def feed():
    """Daily "new books" feed commands"""
    pass

@feed.command()
@click.option('--url', default=None, help='RSS feed URL or path (default: gutenberg.org today.rss)')
@click.option('--date', 'day', default=None, callback=parse_date_option,
              help='Collection date to file the books under (default: today)')
def sync(url: Optional[str], day: Optional[date]):
    """Fetch the daily feed and link its books to the day's collection

    Example:
        reader-sync feed sync
        reader-sync feed sync --url feed.rss --date 2026-02-06
    """
    db = get_database()
    session = db.get_session()
    try:
        result = FeedService(session, settings=get_settings()).refresh_daily_feed(url=url, day=day)
    except SyncError as e:
        raise click.ClickException(str(e))
    finally:
        session.close()

    print_sync_result(result, item_type='items')

@feed.command()
@click.option('--date', 'day', default=None, callback=parse_date_option,
              help='Collection date (default: most recent)')
def show(day: Optional[date]):
    """List the books in a daily collection"""
    db = get_database()
    session = db.get_session()
    try:
        service = FeedService(session, settings=get_settings())
        collection = service.get_collection(day) if day else service.get_latest_collection()
        if collection is None:
            click.echo(click.style("No collection found. Run 'reader-sync feed sync' first.", fg='yellow'))
            return

        click.echo(click.style(f"\nNew books for {format_day(collection.date)}:", fg='blue'))
        for book in sorted(collection.books, key=lambda b: b.title):
            print_book_line(book)
    finally:
        session.close()
