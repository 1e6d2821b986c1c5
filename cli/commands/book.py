# cli/commands/book.py
import click
from typing import Optional
from core.errors import NotFound
from core.events import notifier
from core.sa.models import BookLanguage
from core.sa.repositories import BookRepository, CategoryRepository
from core.services import CatalogService
from ..utils import session_scope, print_table, print_detail

@click.group()
def book():
    """Book related commands"""
    pass

@book.command()
@click.argument('title')
@click.argument('author')
@click.option('--copies', default=1, type=int, help='Number of copies the library owns')
@click.option('--isbn', default=None, help='ISBN')
@click.option('--publisher', default=None, help='Publisher')
@click.option('--ddc', 'ddc_number', default=None, help='Dewey Decimal Classification number')
@click.option('--year', 'publication_year', default=None, type=int, help='Publication year')
@click.option('--price', default=None, type=float, help='Purchase price')
@click.option('--language', default=None, type=click.Choice([lang.value for lang in BookLanguage]), help='Book language')
@click.option('--category', default=None, help='Category name')
def add(title: str, author: str, copies: int, isbn: Optional[str], publisher: Optional[str],
        ddc_number: Optional[str], publication_year: Optional[int], price: Optional[float],
        language: Optional[str], category: Optional[str]):
    """Add a book to the collection

    Example:
        library-desk book add "Wings of Fire" "A. P. J. Abdul Kalam" --copies 3
        library-desk book add "Randamoozham" "M. T. Vasudevan Nair" --language Malayalam --category Novel
    """
    with session_scope() as session:
        category_id = None
        if category:
            found = CategoryRepository(session).get_by_name(category)
            if found is None:
                raise NotFound(f"Category '{category}' not found")
            category_id = found.id

        created = BookRepository(session).create_book(
            title=title,
            author=author,
            total_copies=copies,
            isbn=isbn,
            publisher=publisher,
            ddc_number=ddc_number,
            publication_year=publication_year,
            price=price,
            language=language,
            category_id=category_id
        )
        notifier.publish("books", "insert", created.id)

        click.echo("Successfully added book:")
        print_detail("ID", created.id)
        print_detail("Title", created.title)
        print_detail("Author", created.author)
        print_detail("Copies", created.total_copies)

@book.command(name='list')
@click.option('--query', default=None, help='Search title, author or ISBN')
@click.option('--available-only/--all', default=False, help='Only books with a copy on the shelf')
@click.option('--limit', default=50, type=int, help='Maximum number of books to show')
def list_books(query: Optional[str], available_only: bool, limit: int):
    """List books in the collection"""
    with session_scope() as session:
        books = BookRepository(session).search_books(query=query, available_only=available_only, limit=limit)
        if not books:
            click.echo(click.style("No books found", fg='yellow'))
            return
        print_table(
            ["ID", "Title", "Author", "Category", "Available", "Status"],
            [[b.id, b.title, b.author, b.category_name or '-', f"{b.available_copies}/{b.total_copies}", b.status]
             for b in books]
        )

@book.command()
@click.argument('book_id')
def delete(book_id: str):
    """Delete a book that has no copies on loan"""
    with session_scope() as session:
        if not BookRepository(session).delete_book(book_id):
            raise NotFound(f"Book '{book_id}' not found")
        notifier.publish("books", "delete", book_id)
        click.echo(click.style(f"Deleted book {book_id}", fg='green'))

@book.command()
@click.option('--output', type=click.Path(dir_okay=False, writable=True), default=None,
              help='File to write, defaults to stdout')
def export(output: Optional[str]):
    """Export the whole collection as CSV"""
    with session_scope() as session:
        text = CatalogService(session).export_csv()
    if output:
        with open(output, 'w', newline='', encoding='utf-8') as f:
            f.write(text)
        click.echo(click.style(f"Wrote collection to {output}", fg='green'))
    else:
        click.echo(text, nl=False)
