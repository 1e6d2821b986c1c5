# cli/commands/category.py
import click
from core.events import notifier
from core.sa.repositories import CategoryRepository
from ..utils import session_scope, print_table

@click.group()
def category():
    """Category management commands"""
    pass

@category.command()
@click.argument('name')
def add(name: str):
    """Add a category"""
    with session_scope() as session:
        created = CategoryRepository(session).add_category(name)
        notifier.publish("categories", "insert", created.id)
        click.echo(click.style(f"Added category '{created.name}' ({created.id})", fg='green'))

@category.command()
@click.argument('category_id')
def delete(category_id: str):
    """Delete a category no book refers to"""
    with session_scope() as session:
        CategoryRepository(session).delete_category(category_id)
        notifier.publish("categories", "delete", category_id)
        click.echo(click.style(f"Deleted category {category_id}", fg='green'))

@category.command(name='list')
def list_categories():
    """List categories with their book counts"""
    with session_scope() as session:
        repo = CategoryRepository(session)
        categories = repo.list_categories()
        if not categories:
            click.echo(click.style("No categories yet", fg='yellow'))
            return
        print_table(["ID", "Name", "Books"], [[c.id, c.name, repo.count_books(c.id)] for c in categories])
