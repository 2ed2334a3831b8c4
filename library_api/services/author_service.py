from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.common.validators import (
    SOCIAL_MEDIA_HANDLES,
    is_blank,
    validate_author_data,
)
from library_api.core.db import normalize_id
from library_api.core.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from library_api.logging import get_logger
from library_api.models.author import Author
from library_api.repositories.author_repo import AuthorRepository
from library_api.repositories.base import ListOptions
from library_api.repositories.book_repo import BookRepository
from library_api.schemas.author import (
    AuthorBookBrief,
    AuthorCreate,
    AuthorDetailResponse,
    AuthorResponse,
    AuthorUpdate,
)

logger = get_logger(__name__)

_TEXT_FIELDS = ("name", "bio", "birth_date", "nationality")


def clean_awards(awards: List[str]) -> List[str]:
    """Trim awards and drop duplicates, keeping first-seen order."""
    cleaned: List[str] = []
    for award in awards:
        award = award.strip()
        if award and award not in cleaned:
            cleaned.append(award)
    return cleaned


def normalize_author_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bring validated author fields into their stored form.

    Text is trimmed, email lowercased, blank optional fields become None and
    social media handles are expanded to the four known keys.
    """
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _TEXT_FIELDS:
            normalized[key] = value.strip()
        elif key == "email":
            normalized[key] = None if is_blank(value) else value.strip().lower()
        elif key == "website":
            normalized[key] = None if is_blank(value) else value.strip()
        elif key == "social_media":
            handles = value or {}
            normalized[key] = {
                handle: None if is_blank(handles.get(handle)) else handles[handle].strip()
                for handle in SOCIAL_MEDIA_HANDLES
            }
        elif key == "awards":
            normalized[key] = clean_awards(value or [])
        else:
            normalized[key] = value
    return normalized


class AuthorService:
    """Author operations: validation, uniqueness, book enrichment and the
    delete guard against referenced authors."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.author_repo = AuthorRepository(db)
        self.book_repo = BookRepository(db)

    async def _get_or_404(self, author_id: str) -> Author:
        normalized = normalize_id(author_id)
        author = await self.author_repo.get_by_id(normalized) if normalized else None
        if author is None:
            raise NotFoundException(
                "Author not found", resource_type="author", resource_id=author_id
            )
        return author

    async def _enrich(self, authors: List[Author]) -> List[AuthorResponse]:
        titles = await self.book_repo.titles_by_author(a.id for a in authors)
        enriched = []
        for author in authors:
            response = AuthorResponse.model_validate(author)
            response.book_titles = titles.get(author.id, [])
            response.book_count = len(response.book_titles)
            enriched.append(response)
        return enriched

    async def list_authors(
        self, filters: Dict[str, Any], options: ListOptions
    ) -> Tuple[List[AuthorResponse], int]:
        """
        List authors with their book counts and titles.

        Args:
            filters: ``name`` and ``nationality`` substring filters
            options: Sorting and paging

        Returns:
            The page of enriched authors and the total number of matches
        """
        authors = await self.author_repo.list(filters, options)
        total = await self.author_repo.count(filters)
        return await self._enrich(authors), total

    async def get_author(self, author_id: str) -> AuthorDetailResponse:
        """
        Get one author together with a brief list of their books.

        Raises:
            NotFoundException: If the ID is malformed or unknown
        """
        author = await self._get_or_404(author_id)
        books = await self.book_repo.list_by_author(author.id)

        response = AuthorDetailResponse.model_validate(author)
        response.books = [AuthorBookBrief.model_validate(book) for book in books]
        response.book_titles = [book.title for book in books]
        response.book_count = len(books)
        return response

    async def create_author(self, payload: AuthorCreate) -> AuthorResponse:
        """
        Create an author.

        Raises:
            ValidationException: With every violated rule
            ConflictException: If the email is already taken
        """
        data = payload.model_dump(exclude_unset=True)
        result = validate_author_data(data)
        if not result.is_valid:
            raise ValidationException(result.errors, resource_type="author")

        data = normalize_author_fields(data)
        data.setdefault("social_media", {h: None for h in SOCIAL_MEDIA_HANDLES})
        data.setdefault("awards", [])
        if data.get("is_active") is None:
            data["is_active"] = True

        if data.get("email") and await self.author_repo.get_by_email(data["email"]):
            raise ConflictException(
                "Author with this email already exists", resource_type="author"
            )

        author = await self.author_repo.create(data)
        logger.info(f"Created author {author.id} ({author.name})")
        return AuthorResponse.model_validate(author)

    async def update_author(self, author_id: str, payload: AuthorUpdate) -> AuthorResponse:
        """
        Merge the supplied fields into an existing author.

        Raises:
            NotFoundException: If the ID is malformed or unknown
            ValidationException: If a supplied field breaks a rule
            ConflictException: If the new email belongs to another author
        """
        if normalize_id(author_id) is None:
            raise NotFoundException(
                "Author not found", resource_type="author", resource_id=author_id
            )

        data = payload.model_dump(exclude_unset=True)
        result = validate_author_data(data, is_update=True)
        if not result.is_valid:
            raise ValidationException(result.errors, resource_type="author")

        author = await self._get_or_404(author_id)
        data = normalize_author_fields(data)

        if data.get("email") and await self.author_repo.get_by_email(
            data["email"], exclude_id=author.id
        ):
            raise ConflictException(
                "Another author with this email already exists",
                resource_type="author",
                resource_id=author.id,
            )

        author = await self.author_repo.update(author, data)
        logger.info(f"Updated author {author.id}: {sorted(data)}")
        enriched = await self._enrich([author])
        return enriched[0]

    async def add_award(self, author_id: str, award: Optional[str]) -> AuthorResponse:
        """Add an award to the author unless they already hold it."""
        author = await self._get_or_404(author_id)
        if is_blank(award) or not isinstance(award, str):
            raise ValidationException(["Award is required"], resource_type="author")

        awards = clean_awards(list(author.awards or []) + [award])
        author = await self.author_repo.update(author, {"awards": awards})
        logger.info(f"Award '{award.strip()}' recorded for author {author.id}")
        enriched = await self._enrich([author])
        return enriched[0]

    async def delete_author(self, author_id: str) -> Dict[str, Any]:
        """
        Delete an author that no book references.

        Raises:
            NotFoundException: If the ID is malformed or unknown
            ConflictException: If books still point at the author
        """
        author = await self._get_or_404(author_id)

        book_count = await self.book_repo.count_by_author(author.id)
        if book_count > 0:
            logger.warning(f"Refusing to delete author {author.id}: {book_count} book(s)")
            raise ConflictException(
                f"Cannot delete author who has {book_count} book(s) in the system. "
                "Please remove or reassign the books first.",
                resource_type="author",
                resource_id=author.id,
            )

        name = author.name
        await self.author_repo.delete(author)
        logger.info(f"Deleted author {author_id} ({name})")
        return {"message": "Author deleted successfully", "deletedAuthor": name}
