# core/sa/models/category.py
from sqlalchemy import String, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, CreatedAtMixin, new_id

class Category(Base, CreatedAtMixin):
    __tablename__ = 'categories'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Relationships
    books = relationship('Book', back_populates='category', passive_deletes='all')

    __table_args__ = (
        Index('idx_categories_name', 'name'),
    )
