from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.common.validators import is_blank, normalize_isbn, validate_book_data
from library_api.core.config import get_settings
from library_api.core.db import normalize_id, utcnow
from library_api.core.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from library_api.logging import get_logger
from library_api.models.book import Book
from library_api.repositories.author_repo import AuthorRepository
from library_api.repositories.base import ListOptions
from library_api.repositories.book_repo import BookRepository
from library_api.schemas.author import AuthorInDB
from library_api.schemas.book import BookCreate, BookResponse, BookUpdate

logger = get_logger(__name__)

_TEXT_FIELDS = ("title", "genre", "published_date", "description")


def normalize_book_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Trim text, strip ISBN separators and canonicalise the author ID."""
    normalized = dict(data)
    for key in _TEXT_FIELDS:
        if key in normalized:
            normalized[key] = normalized[key].strip()
    if "isbn" in normalized:
        normalized["isbn"] = normalize_isbn(normalized["isbn"])
    if "author_id" in normalized:
        normalized["author_id"] = normalize_id(normalized["author_id"])
    if normalized.get("rating") is not None:
        normalized["rating"] = float(normalized["rating"])
    return normalized


class BookService:
    """
    Book operations.

    Covers validation, ISBN uniqueness, author existence checks, author
    enrichment and the lending state machine (Available <-> OnLoan).
    """

    def __init__(self, db: AsyncSession, loan_period_days: Optional[int] = None):
        self.db = db
        self.book_repo = BookRepository(db)
        self.author_repo = AuthorRepository(db)
        if loan_period_days is None:
            loan_period_days = get_settings().LOAN_PERIOD_DAYS
        self.loan_period = timedelta(days=loan_period_days)

    async def _get_or_404(self, book_id: str) -> Book:
        normalized = normalize_id(book_id)
        book = await self.book_repo.get_by_id(normalized) if normalized else None
        if book is None:
            raise NotFoundException("Book not found", resource_type="book", resource_id=book_id)
        return book

    async def _enrich(self, books: List[Book]) -> List[BookResponse]:
        authors = await self.author_repo.get_many(book.author_id for book in books)
        enriched = []
        for book in books:
            response = BookResponse.model_validate(book)
            author = authors.get(book.author_id)
            # Books can outlive an author removed out-of-band
            response.author = AuthorInDB.model_validate(author) if author else None
            enriched.append(response)
        return enriched

    async def _ensure_author_exists(self, author_id: str) -> None:
        if await self.author_repo.get_by_id(author_id) is None:
            raise NotFoundException(
                "Author not found", resource_type="author", resource_id=author_id
            )

    async def list_books(
        self, filters: Dict[str, Any], options: ListOptions
    ) -> Tuple[List[BookResponse], int]:
        """
        List books, each with its author attached.

        Args:
            filters: ``genre`` substring, ``author_id`` and ``availability``
            options: Sorting and paging

        Returns:
            The page of enriched books and the total number of matches
        """
        books = await self.book_repo.list(filters, options)
        total = await self.book_repo.count(filters)
        return await self._enrich(books), total

    async def get_book(self, book_id: str) -> BookResponse:
        book = await self._get_or_404(book_id)
        enriched = await self._enrich([book])
        return enriched[0]

    async def create_book(self, payload: BookCreate) -> BookResponse:
        """
        Create a book for an existing author.

        Raises:
            ValidationException: With every violated rule
            ConflictException: If the ISBN is already taken
            NotFoundException: If the author does not exist
        """
        data = payload.model_dump(exclude_unset=True)
        result = validate_book_data(data)
        if not result.is_valid:
            raise ValidationException(result.errors, resource_type="book")

        data = normalize_book_fields(data)
        if data.get("rating") is None:
            data["rating"] = 0.0

        if await self.book_repo.get_by_isbn(data["isbn"]):
            raise ConflictException("Book with this ISBN already exists", resource_type="book")
        await self._ensure_author_exists(data["author_id"])

        book = await self.book_repo.create(data)
        logger.info(f"Created book {book.id} ({book.title}) for author {book.author_id}")
        enriched = await self._enrich([book])
        return enriched[0]

    async def update_book(self, book_id: str, payload: BookUpdate) -> BookResponse:
        """
        Merge the supplied fields into an existing book.

        Lending fields are not accepted here; use borrow and return.

        Raises:
            NotFoundException: If the book, or a newly referenced author, is missing
            ValidationException: If a supplied field breaks a rule
            ConflictException: If the new ISBN belongs to another book
        """
        if normalize_id(book_id) is None:
            raise NotFoundException("Book not found", resource_type="book", resource_id=book_id)

        data = payload.model_dump(exclude_unset=True)
        result = validate_book_data(data, is_update=True)
        if not result.is_valid:
            raise ValidationException(result.errors, resource_type="book")

        book = await self._get_or_404(book_id)
        data = normalize_book_fields(data)

        if "isbn" in data and await self.book_repo.get_by_isbn(data["isbn"], exclude_id=book.id):
            raise ConflictException(
                "Book with this ISBN already exists",
                resource_type="book",
                resource_id=book.id,
            )
        if "author_id" in data and data["author_id"] != book.author_id:
            await self._ensure_author_exists(data["author_id"])

        book = await self.book_repo.update(book, data)
        logger.info(f"Updated book {book.id}: {sorted(data)}")
        enriched = await self._enrich([book])
        return enriched[0]

    async def delete_book(self, book_id: str) -> Dict[str, Any]:
        """
        Delete a book that is not on loan.

        Raises:
            NotFoundException: If the ID is malformed or unknown
            ConflictException: If the book is currently borrowed
        """
        book = await self._get_or_404(book_id)
        title = book.title

        if book.is_on_loan or not await self.book_repo.delete_if_available(book.id):
            logger.warning(f"Refusing to delete book {book.id}: on loan")
            raise ConflictException(
                "Cannot delete book that is currently borrowed",
                resource_type="book",
                resource_id=book.id,
            )

        self.db.expunge(book)
        logger.info(f"Deleted book {book_id} ({title})")
        return {"message": "Book deleted successfully", "deletedBook": title}

    async def borrow_book(self, book_id: str, borrower_info: Optional[str]) -> BookResponse:
        """
        Lend an available book.

        Args:
            book_id: Book ID
            borrower_info: Who is borrowing it, stored trimmed

        Raises:
            ValidationException: If ``borrower_info`` is blank
            NotFoundException: If the ID is malformed or unknown
            ConflictException: If the book is already on loan
        """
        if is_blank(borrower_info) or not isinstance(borrower_info, str):
            raise ValidationException(["Borrower information is required"], resource_type="book")

        book = await self._get_or_404(book_id)
        now = utcnow()
        applied = await self.book_repo.set_lending_state(
            book.id,
            expected_availability=True,
            values={
                "availability": False,
                "borrowed_by": borrower_info.strip(),
                "borrowed_date": now,
                "return_due_date": now + self.loan_period,
            },
        )
        if not applied:
            logger.warning(f"Borrow rejected, book {book.id} is already on loan")
            raise ConflictException(
                "Book is not available for borrowing",
                resource_type="book",
                resource_id=book.id,
            )

        book = await self.book_repo.get_by_id(book.id, refresh=True)
        logger.info(f"Book {book.id} borrowed by {book.borrowed_by} until {book.return_due_date}")
        enriched = await self._enrich([book])
        return enriched[0]

    async def return_book(self, book_id: str) -> BookResponse:
        """
        Take a borrowed book back.

        Raises:
            NotFoundException: If the ID is malformed or unknown
            ConflictException: If the book is not on loan
        """
        book = await self._get_or_404(book_id)
        applied = await self.book_repo.set_lending_state(
            book.id,
            expected_availability=False,
            values={
                "availability": True,
                "borrowed_by": None,
                "borrowed_date": None,
                "return_due_date": None,
            },
        )
        if not applied:
            logger.warning(f"Return rejected, book {book.id} is not on loan")
            raise ConflictException(
                "Book is not currently borrowed",
                resource_type="book",
                resource_id=book.id,
            )

        book = await self.book_repo.get_by_id(book.id, refresh=True)
        logger.info(f"Book {book.id} returned")
        enriched = await self._enrich([book])
        return enriched[0]
