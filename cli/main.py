# cli/main.py
import click
from typing import Optional
from reader_sync.config import Settings
from reader_sync.utils import logging as sync_logging
from .commands.catalog import catalog
from .commands.feed import feed
from .commands.book import book
from .utils import get_database

@click.group()
@click.option('--database-url', default=None, help='SQLAlchemy database URL (default: $DATABASE_URL or sqlite:///books.db)')
@click.option('--log-level', default=None, help='Logging level (default: $READER_SYNC_LOG_LEVEL or INFO)')
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str], log_level: Optional[str]):
    """Gutenberg Reader sync CLI"""
    settings = Settings.from_env().override(
        database_url=database_url,
        log_level=log_level.upper() if log_level else None
    )
    sync_logging.configure(settings.log_level)
    ctx.obj = settings

@cli.command(name='init-db')
def init_db():
    """Create the database tables"""
    get_database()
    click.echo(click.style("Database initialized.", fg='green'))

cli.add_command(catalog)
cli.add_command(feed)
cli.add_command(book)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
