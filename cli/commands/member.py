# cli/commands/member.py
import click
from typing import Optional
from core.events import notifier
from core.sa.models import MembershipType, MemberStatus
from core.sa.repositories import MemberRepository
from ..utils import session_scope, print_table, print_detail, format_date

@click.group()
def member():
    """Member related commands"""
    pass

@member.command()
@click.argument('name')
@click.argument('email')
@click.option('--phone', default=None, help='Phone number')
@click.option('--address', default=None, help='Postal address')
@click.option('--place', default=None, help='Place or town')
@click.option('--class', 'member_class', default=None, help='School class, for student members')
@click.option('--register-number', default=None, help='School register number')
@click.option('--type', 'membership_type', default=MembershipType.REGULAR.value,
              type=click.Choice([t.value for t in MembershipType]), help='Membership type')
def add(name: str, email: str, phone: Optional[str], address: Optional[str], place: Optional[str],
        member_class: Optional[str], register_number: Optional[str], membership_type: str):
    """Register a new member

    Example:
        library-desk member add "Anu Joseph" anu@example.com --type student --class 9B
    """
    with session_scope() as session:
        created = MemberRepository(session).create_member(
            name=name,
            email=email,
            phone=phone,
            address=address,
            place=place,
            member_class=member_class,
            register_number=register_number,
            membership_type=membership_type
        )
        notifier.publish("members", "insert", created.id)

        click.echo("Successfully registered member:")
        print_detail("ID", created.id)
        print_detail("Name", created.name)
        print_detail("Type", created.membership_type)

@member.command(name='list')
@click.option('--query', default=None, help='Search name, email or phone')
@click.option('--status', default=None, type=click.Choice([s.value for s in MemberStatus]), help='Member status')
@click.option('--limit', default=50, type=int, help='Maximum number of members to show')
def list_members(query: Optional[str], status: Optional[str], limit: int):
    """List members"""
    with session_scope() as session:
        members = MemberRepository(session).search_members(query=query, status=status, limit=limit)
        if not members:
            click.echo(click.style("No members found", fg='yellow'))
            return
        print_table(
            ["ID", "Name", "Email", "Type", "Status", "Since"],
            [[m.id, m.name, m.email, m.membership_type, m.status, format_date(m.membership_date)] for m in members]
        )
