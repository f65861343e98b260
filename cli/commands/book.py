import click
from reader_sync.sa.repositories import BookRepository
from ..utils import get_database, print_book_line

@click.group()
def book():
    """Book related commands"""
    pass

@book.command()
@click.argument('book_id')
def show(book_id: str):
    """Show a stored book

    Example:
        reader-sync book show 84
    """
    db = get_database()
    session = db.get_session()
    try:
        book_obj = BookRepository(session).get_by_id(book_id)
        if book_obj is None:
            raise click.ClickException(f"Book {book_id} not found")

        click.echo(f"  Title: {book_obj.display_title}")
        click.echo(f"  Author: {book_obj.author}")
        click.echo(f"  Language: {book_obj.language} {book_obj.language_tag}")
        click.echo(f"  Link: {book_obj.link}")
        click.echo(f"  Cover: {book_obj.cover_url}")
        click.echo(f"  HTML: {book_obj.remote_html_url}")
        click.echo(f"  EPUB: {book_obj.remote_epub_url}")
        click.echo(f"  Read: {book_obj.last_read_location:.0%}")
        if book_obj.local_file_name:
            click.echo(f"  Downloaded as: {book_obj.local_file_name}")
    finally:
        session.close()

@book.command()
@click.argument('query')
@click.option('--limit', default=20, type=int, help='Maximum number of results')
def search(query: str, limit: int):
    """Search stored books by title"""
    db = get_database()
    session = db.get_session()
    try:
        books = BookRepository(session).search_by_title(query, limit=limit)
        if not books:
            click.echo(click.style(f"No books matching '{query}'", fg='yellow'))
            return
        for book_obj in books:
            print_book_line(book_obj)
    finally:
        session.close()
