# cli/main.py
import click
from typing import Optional
from core.config import configure_logging
from core.sa.database import Database, get_database, set_database
from .commands.book import book
from .commands.member import member
from .commands.category import category
from .commands.circulation import circulation
from .commands.report import report

@click.group()
@click.option('--database', 'database_url', default=None,
              help='Database URL (default from DATABASE_URL)')
@click.option('--log-level', default=None, help='Logging level (default from LOG_LEVEL)')
def cli(database_url: Optional[str], log_level: Optional[str]):
    """Library Desk CLI"""
    configure_logging(log_level)
    if database_url:
        set_database(Database(database_url))

@cli.command(name='init-db')
def init_db():
    """Create the library tables"""
    db = get_database()
    db.init_db()
    click.echo(click.style("Database initialized", fg='green'))

cli.add_command(book)
cli.add_command(member)
cli.add_command(category)
cli.add_command(circulation)
cli.add_command(report)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
