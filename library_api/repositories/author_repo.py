from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import asc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.db import generate_id, utcnow
from library_api.models.author import Author
from library_api.models.book import Book
from library_api.repositories.base import ListOptions, contains, order_clause, store_operation

# Derived at query time, never stored
_book_count = (
    select(func.count(Book.id))
    .where(Book.author_id == Author.id)
    .correlate(Author)
    .scalar_subquery()
)


class AuthorRepository:
    """Repository for author documents."""

    SORTABLE = {
        "name": Author.name,
        "nationality": Author.nationality,
        "birthDate": Author.birth_date,
        "email": Author.email,
        "isActive": Author.is_active,
        "createdAt": Author.created_at,
        "updatedAt": Author.updated_at,
        "bookCount": _book_count,
    }

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("create", "author", "Author with this email already exists")
    async def create(self, data: Dict[str, Any]) -> Author:
        """Insert a new author.

        Args:
            data: Normalised author fields.

        Returns:
            The stored Author, with ``created_at == updated_at``.

        Raises:
            ConflictException: If the email unique index rejects the row.
        """
        now = utcnow()
        author = Author(id=generate_id(), **data, created_at=now, updated_at=now)
        self.db.add(author)
        await self.db.commit()
        return author

    @store_operation("read", "author")
    async def get_by_id(self, author_id: str) -> Optional[Author]:
        result = await self.db.execute(select(Author).where(Author.id == author_id))
        return result.scalars().first()

    @store_operation("read", "author")
    async def get_many(self, author_ids: Iterable[str]) -> Dict[str, Author]:
        """Fetch several authors at once, keyed by ID. Missing IDs are absent."""
        ids = {i for i in author_ids if i}
        if not ids:
            return {}
        result = await self.db.execute(select(Author).where(Author.id.in_(ids)))
        return {author.id: author for author in result.scalars().all()}

    @store_operation("read", "author")
    async def get_by_email(
        self, email: str, exclude_id: Optional[str] = None
    ) -> Optional[Author]:
        query = select(Author).where(Author.email == email)
        if exclude_id:
            query = query.where(Author.id != exclude_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    def _conditions(self, filters: Dict[str, Any]) -> List[Any]:
        conditions = []
        if filters.get("name"):
            conditions.append(contains(Author.name, filters["name"]))
        if filters.get("nationality"):
            conditions.append(contains(Author.nationality, filters["nationality"]))
        if filters.get("is_active") is not None:
            conditions.append(Author.is_active == filters["is_active"])
        return conditions

    @store_operation("list", "author")
    async def list(self, filters: Dict[str, Any], options: ListOptions) -> List[Author]:
        """List authors matching the filters, sorted by name unless told otherwise."""
        query = select(Author).where(*self._conditions(filters))

        if options.sort_by:
            query = query.order_by(order_clause(self.SORTABLE, options, "authors"), asc(Author.id))
        else:
            query = query.order_by(asc(Author.name), asc(Author.id))

        if options.skip:
            query = query.offset(options.skip)
        if options.limit:
            query = query.limit(options.limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    @store_operation("count", "author")
    async def count(self, filters: Dict[str, Any]) -> int:
        query = select(func.count(Author.id)).where(*self._conditions(filters))
        result = await self.db.execute(query)
        return result.scalar_one()

    @store_operation("update", "author", "Another author with this email already exists")
    async def update(self, author: Author, data: Dict[str, Any]) -> Author:
        """Merge ``data`` into the author and bump ``updated_at``."""
        for key, value in data.items():
            setattr(author, key, value)
        author.updated_at = utcnow()
        await self.db.commit()
        return author

    @store_operation("delete", "author")
    async def delete(self, author: Author) -> None:
        await self.db.delete(author)
        await self.db.commit()
