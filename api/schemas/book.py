# api/schemas/book.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

class CategoryBase(BaseModel):
    name: str

class CategoryCreate(CategoryBase):
    pass

class Category(CategoryBase):
    id: str
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)

class BookBase(BaseModel):
    title: str
    author: str
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    ddc_number: Optional[str] = None
    publication_year: Optional[int] = None
    price: Optional[float] = None
    language: Optional[str] = None
    category_id: Optional[str] = None

class BookCreate(BookBase):
    total_copies: int = Field(1, description="Number of copies owned, all start on the shelf")

class BookUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    ddc_number: Optional[str] = None
    publication_year: Optional[int] = None
    price: Optional[float] = None
    language: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[str] = None
    total_copies: Optional[int] = None

class Book(BookBase):
    id: str
    total_copies: int
    available_copies: int
    status: str
    category_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)

class BookList(BaseModel):
    items: List[Book]
    total: int
    page: int
    size: int
    
    model_config = ConfigDict(from_attributes=True)
