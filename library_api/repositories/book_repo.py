from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import asc, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.db import generate_id, normalize_id, utcnow
from library_api.models.book import Book
from library_api.repositories.base import ListOptions, contains, order_clause, store_operation


class BookRepository:
    """Repository for book documents, lending state included."""

    SORTABLE = {
        "title": Book.title,
        "genre": Book.genre,
        "isbn": Book.isbn,
        "publishedDate": Book.published_date,
        "totalPages": Book.total_pages,
        "rating": Book.rating,
        "availability": Book.availability,
        "createdAt": Book.created_at,
        "updatedAt": Book.updated_at,
    }

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("create", "book", "Book with this ISBN already exists")
    async def create(self, data: Dict[str, Any]) -> Book:
        """Insert a new, available book."""
        now = utcnow()
        book = Book(
            id=generate_id(),
            **data,
            availability=True,
            borrowed_by=None,
            borrowed_date=None,
            return_due_date=None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(book)
        await self.db.commit()
        return book

    @store_operation("read", "book")
    async def get_by_id(self, book_id: str, refresh: bool = False) -> Optional[Book]:
        """
        Get a book by ID.

        Args:
            book_id: Book ID
            refresh: Overwrite any copy already held by the session, used after
                a conditional update that bypassed the identity map

        Returns:
            Book or None if not found
        """
        query = select(Book).where(Book.id == book_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalars().first()

    @store_operation("read", "book")
    async def get_by_isbn(self, isbn: str, exclude_id: Optional[str] = None) -> Optional[Book]:
        query = select(Book).where(Book.isbn == isbn)
        if exclude_id:
            query = query.where(Book.id != exclude_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    def _conditions(self, filters: Dict[str, Any]) -> List[Any]:
        conditions = []
        if filters.get("genre"):
            conditions.append(contains(Book.genre, filters["genre"]))
        if filters.get("title"):
            conditions.append(contains(Book.title, filters["title"]))
        if filters.get("author_id"):
            # A malformed author ID can never match a stored one
            conditions.append(Book.author_id == (normalize_id(filters["author_id"]) or ""))
        if filters.get("availability") is not None:
            conditions.append(Book.availability == filters["availability"])
        return conditions

    @store_operation("list", "book")
    async def list(self, filters: Dict[str, Any], options: ListOptions) -> List[Book]:
        """List books matching the filters, newest first unless told otherwise."""
        query = select(Book).where(*self._conditions(filters))

        if options.sort_by:
            query = query.order_by(order_clause(self.SORTABLE, options, "books"), asc(Book.id))
        else:
            query = query.order_by(desc(Book.created_at), asc(Book.id))

        if options.skip:
            query = query.offset(options.skip)
        if options.limit:
            query = query.limit(options.limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    @store_operation("count", "book")
    async def count(self, filters: Dict[str, Any]) -> int:
        query = select(func.count(Book.id)).where(*self._conditions(filters))
        result = await self.db.execute(query)
        return result.scalar_one()

    @store_operation("count", "book")
    async def count_by_author(self, author_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Book.id)).where(Book.author_id == author_id)
        )
        return result.scalar_one()

    @store_operation("list", "book")
    async def titles_by_author(self, author_ids: Iterable[str]) -> Dict[str, List[str]]:
        """Titles of the books written by each author, in one round trip."""
        ids = {i for i in author_ids if i}
        if not ids:
            return {}
        result = await self.db.execute(
            select(Book.author_id, Book.title)
            .where(Book.author_id.in_(ids))
            .order_by(asc(Book.title), asc(Book.id))
        )
        titles: Dict[str, List[str]] = defaultdict(list)
        for author_id, title in result.all():
            titles[author_id].append(title)
        return dict(titles)

    @store_operation("list", "book")
    async def list_by_author(self, author_id: str) -> List[Book]:
        result = await self.db.execute(
            select(Book)
            .where(Book.author_id == author_id)
            .order_by(asc(Book.title), asc(Book.id))
        )
        return list(result.scalars().all())

    @store_operation("update", "book", "Book with this ISBN already exists")
    async def update(self, book: Book, data: Dict[str, Any]) -> Book:
        for key, value in data.items():
            setattr(book, key, value)
        book.updated_at = utcnow()
        await self.db.commit()
        return book

    @store_operation("update", "book")
    async def set_lending_state(
        self, book_id: str, expected_availability: bool, values: Dict[str, Any]
    ) -> bool:
        """
        Move a book between available and borrowed in a single statement.

        The row is only touched while ``availability`` still equals
        ``expected_availability``, so two concurrent borrows of the same copy
        cannot both succeed.

        Returns:
            True if the transition was applied
        """
        stmt = (
            update(Book)
            .where(Book.id == book_id, Book.availability == expected_availability)
            .values(**values, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount == 1

    @store_operation("delete", "book")
    async def delete_if_available(self, book_id: str) -> bool:
        """
        Delete a book only while it is not on loan.

        Like ``set_lending_state``, the availability check and the delete are
        one statement, so a borrow landing in between cannot be lost.

        Returns:
            True if the book was deleted
        """
        stmt = (
            delete(Book)
            .where(Book.id == book_id, Book.availability.is_(True))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount == 1
