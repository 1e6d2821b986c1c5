# cli/utils.py
import click
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Sequence
from sqlalchemy.orm import Session

from core.errors import LibraryError
from core.sa.database import get_database

@contextmanager
def session_scope() -> Iterator[Session]:
    """Open a session on the configured database and turn library errors into a clean exit"""
    session = get_database().get_session()
    try:
        yield session
    except LibraryError as e:
        session.rollback()
        click.echo(click.style(f"Error: {e.message}", fg='red'), err=True)
        raise click.exceptions.Exit(1)
    finally:
        session.close()

def format_date(value: Optional[datetime]) -> str:
    return value.strftime('%Y-%m-%d') if value else '-'

def print_table(headers: Sequence[str], rows: List[Sequence[object]]) -> None:
    """Print rows as left-aligned columns sized to their widest cell"""
    cells = [[str(h) for h in headers]] + [[str(c) if c is not None else '' for c in row] for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]
    click.echo(click.style("  ".join(h.ljust(w) for h, w in zip(cells[0], widths)), fg='blue'))
    for row in cells[1:]:
        click.echo("  ".join(c.ljust(w) for c, w in zip(row, widths)))

def print_detail(label: str, value: object, color: str = 'cyan') -> None:
    click.echo(click.style(f"  {label}: ", fg='blue') + click.style(str(value), fg=color))
