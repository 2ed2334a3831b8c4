from datetime import datetime
from typing import Any, Optional

from library_api.schemas.author import AuthorInDB
from library_api.schemas.base import CamelModel


class BookCreate(CamelModel):
    """Candidate book fields, untyped so the validators see them as sent."""

    title: Any = None
    author_id: Any = None
    isbn: Any = None
    genre: Any = None
    published_date: Any = None
    description: Any = None
    total_pages: Any = None
    rating: Any = None


class BookUpdate(BookCreate):
    """Patch for a book. Lending fields are not part of it: they only change
    through borrow and return."""


class BorrowRequest(CamelModel):
    borrower_info: Any = None


class BookInDB(CamelModel):
    id: str
    title: str
    author_id: str
    isbn: str
    genre: str
    published_date: str
    description: str
    total_pages: int
    rating: float = 0.0
    availability: bool = True
    borrowed_by: Optional[str] = None
    borrowed_date: Optional[datetime] = None
    return_due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class BookResponse(BookInDB):
    author: Optional[AuthorInDB] = None
