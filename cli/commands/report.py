# cli/commands/report.py
import click
from typing import Optional
from core.services import ReportingAggregator
from ..utils import session_scope, print_table, format_date

@click.group()
def report():
    """Circulation reports"""
    pass

@report.command()
@click.option('--limit', default=None, type=int, help='Entries in the rankings (default from REPORT_LIMIT)')
def show(limit: Optional[int]):
    """Most borrowed books, most active members, loans out and overdue"""
    with session_scope() as session:
        reports = ReportingAggregator(session).get_reports(limit)

        click.echo("\n" + click.style("Most borrowed books", fg='blue', bold=True))
        print_table(["Title", "Author", "Loans"], [[b.title, b.author, b.count] for b in reports.most_borrowed])

        click.echo("\n" + click.style("Most active members", fg='blue', bold=True))
        print_table(["Name", "Email", "Loans"], [[m.name, m.email, m.count] for m in reports.most_active])

        click.echo("\n" + click.style(f"Currently issued ({len(reports.currently_issued)})", fg='blue', bold=True))
        print_table(
            ["Title", "Member", "Issued", "Due"],
            [[i.title, i.member_name, format_date(i.issue_date), format_date(i.due_date)]
             for i in reports.currently_issued]
        )

        click.echo("\n" + click.style(f"Overdue ({len(reports.overdue)})", fg='red', bold=True))
        print_table(
            ["Title", "Member", "Email", "Due"],
            [[i.title, i.member_name, i.member_email, format_date(i.due_date)] for i in reports.overdue]
        )
