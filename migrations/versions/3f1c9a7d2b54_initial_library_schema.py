"""Initial library schema

Revision ID: 3f1c9a7d2b54
Revises: 
Create Date: 2025-06-02 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b54'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('categories',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('idx_categories_name', 'categories', ['name'])

    op.create_table('books',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('isbn', sa.String(length=20), nullable=True),
        sa.Column('publisher', sa.String(length=255), nullable=True),
        sa.Column('ddc_number', sa.String(length=50), nullable=True),
        sa.Column('publication_year', sa.Integer(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('language', sa.String(length=20), nullable=True),
        sa.Column('category_id', sa.String(length=36), nullable=True),
        sa.Column('total_copies', sa.Integer(), nullable=False),
        sa.Column('available_copies', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('total_copies >= 1', name='ck_books_total_copies_positive'),
        sa.CheckConstraint(
            'available_copies >= 0 AND available_copies <= total_copies',
            name='ck_books_available_copies_range'
        ),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_books_title', 'books', ['title'])
    op.create_index('idx_books_author', 'books', ['author'])
    op.create_index('idx_books_isbn', 'books', ['isbn'])
    op.create_index('idx_books_category_id', 'books', ['category_id'])

    op.create_table('members',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('place', sa.String(length=255), nullable=True),
        sa.Column('class', sa.String(length=50), nullable=True),
        sa.Column('register_number', sa.String(length=50), nullable=True),
        sa.Column('membership_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('membership_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_members_name', 'members', ['name'])
    op.create_index('idx_members_email', 'members', ['email'])

    # book_id/member_id carry no foreign keys so history survives deletions
    op.create_table('circulation',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('book_id', sa.String(length=36), nullable=False),
        sa.Column('member_id', sa.String(length=36), nullable=False),
        sa.Column('issue_date', sa.DateTime(), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('return_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('fine_amount', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('fine_amount >= 0', name='ck_circulation_fine_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_circulation_book_status', 'circulation', ['book_id', 'status'])
    op.create_index('idx_circulation_member_id', 'circulation', ['member_id'])
    op.create_index('idx_circulation_due_date', 'circulation', ['due_date'])

    op.create_table('feedback',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('member_id', sa.String(length=36), nullable=False),
        sa.Column('book_id', sa.String(length=36), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('review', sa.Text(), nullable=True),
        sa.Column('feedback_type', sa.String(length=30), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('suggestion_title', sa.String(length=500), nullable=True),
        sa.Column('suggestion_author', sa.String(length=255), nullable=True),
        sa.Column('suggestion_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_feedback_rating_range'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_feedback_status', 'feedback', ['status'])
    op.create_index('idx_feedback_member_id', 'feedback', ['member_id'])


def downgrade() -> None:
    op.drop_table('feedback')
    op.drop_table('circulation')
    op.drop_table('members')
    op.drop_table('books')
    op.drop_table('categories')
