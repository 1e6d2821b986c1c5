# cli/commands/circulation.py
import click
from typing import Optional
from core.events import notifier
from core.sa.models import CirculationStatus
from core.sa.repositories import CirculationRepository
from core.services import CirculationEngine, ReportingAggregator, is_overdue
from ..utils import session_scope, print_table, print_detail, format_date

@click.group()
def circulation():
    """Issue and return books"""
    pass

@circulation.command()
@click.argument('book_id')
@click.argument('member_id')
@click.option('--days', 'loan_days', default=None, type=int, help='Loan period in days (default from DEFAULT_LOAN_DAYS)')
def issue(book_id: str, member_id: str, loan_days: Optional[int]):
    """Lend a copy of a book to a member

    Example:
        library-desk circulation issue <book-id> <member-id> --days 21
    """
    with session_scope() as session:
        record = CirculationEngine(session, notifier=notifier).issue(book_id, member_id, loan_days)
        click.echo(click.style("Book issued", fg='green'))
        print_detail("Loan", record.id)
        print_detail("Due", format_date(record.due_date))

@circulation.command(name='return')
@click.argument('book_id')
def return_book(book_id: str):
    """Return the most recent open loan of a book"""
    with session_scope() as session:
        record = CirculationEngine(session, notifier=notifier).return_book(book_id)
        click.echo(click.style("Book returned", fg='green'))
        print_detail("Loan", record.id)
        print_detail("Issued", format_date(record.issue_date))

@circulation.command(name='list')
@click.option('--status', default=None, type=click.Choice([s.value for s in CirculationStatus]), help='Stored status')
@click.option('--book', 'book_id', default=None, help='Only loans of this book')
@click.option('--member', 'member_id', default=None, help='Only loans to this member')
@click.option('--limit', default=50, type=int, help='Maximum number of records to show')
def list_records(status: Optional[str], book_id: Optional[str], member_id: Optional[str], limit: int):
    """Show circulation history, newest first"""
    with session_scope() as session:
        records = CirculationRepository(session).list_records(
            status=status, book_id=book_id, member_id=member_id, limit=limit
        )
        if not records:
            click.echo(click.style("No circulation records", fg='yellow'))
            return
        print_table(
            ["ID", "Book", "Member", "Issued", "Due", "Returned", "Status"],
            [[r.id, r.book_id, r.member_id, format_date(r.issue_date), format_date(r.due_date),
              format_date(r.return_date), "overdue" if is_overdue(r) else r.status] for r in records]
        )

@circulation.command()
def overdue():
    """Show open loans past their due date"""
    with session_scope() as session:
        items = ReportingAggregator(session).overdue()
        if not items:
            click.echo(click.style("Nothing is overdue", fg='green'))
            return
        print_table(
            ["Loan", "Title", "Member", "Email", "Due"],
            [[i.circulation_id, i.title, i.member_name, i.member_email, format_date(i.due_date)] for i in items]
        )
