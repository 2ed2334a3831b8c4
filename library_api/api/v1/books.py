from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from library_api.api.deps import get_book_service, require_user
from library_api.common.pagination import PaginationParams
from library_api.repositories.base import ListOptions
from library_api.schemas.book import BookCreate, BookResponse, BookUpdate, BorrowRequest
from library_api.schemas.response import ListResponse, Messages, SuccessResponse
from library_api.services.book_service import BookService

router = APIRouter()


@router.get("", response_model=ListResponse[BookResponse])
async def list_books(
    genre: Optional[str] = Query(None, description="Substring of the genre"),
    author_id: Optional[str] = Query(None, alias="authorId", description="Exact author ID"),
    availability: Optional[bool] = Query(None, description="Only available or borrowed books"),
    pagination: PaginationParams = Depends(),
    service: BookService = Depends(get_book_service),
):
    """
    List books, each with its author attached.

    - **genre**: case-insensitive substring filter
    - **authorId**, **availability**: exact filters
    - **sortBy**: title, genre, isbn, publishedDate, totalPages, rating,
      availability, createdAt, updatedAt (newest first by default)
    """
    books, total = await service.list_books(
        {"genre": genre, "author_id": author_id, "availability": availability},
        ListOptions(
            sort_by=pagination.sort_by,
            sort_order=pagination.sort_order,
            skip=pagination.skip,
            limit=pagination.limit,
        ),
    )
    return ListResponse[BookResponse](
        message=Messages.BOOKS_RETRIEVED, data=books, meta=pagination.meta(total)
    )


@router.get("/{book_id}", response_model=SuccessResponse[BookResponse])
async def get_book(book_id: str, service: BookService = Depends(get_book_service)):
    book = await service.get_book(book_id)
    return SuccessResponse[BookResponse](message=Messages.BOOK_RETRIEVED, data=book)


@router.post(
    "",
    response_model=SuccessResponse[BookResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_user)],
)
async def create_book(payload: BookCreate, service: BookService = Depends(get_book_service)):
    """Create a book. The author must exist and the ISBN must be unused."""
    book = await service.create_book(payload)
    return SuccessResponse[BookResponse](message=Messages.BOOK_CREATED, data=book)


@router.put(
    "/{book_id}",
    response_model=SuccessResponse[BookResponse],
    dependencies=[Depends(require_user)],
)
async def update_book(
    book_id: str,
    payload: BookUpdate,
    service: BookService = Depends(get_book_service),
):
    book = await service.update_book(book_id, payload)
    return SuccessResponse[BookResponse](message=Messages.BOOK_UPDATED, data=book)


@router.delete(
    "/{book_id}",
    response_model=SuccessResponse[Dict[str, Any]],
    dependencies=[Depends(require_user)],
)
async def delete_book(book_id: str, service: BookService = Depends(get_book_service)):
    result = await service.delete_book(book_id)
    return SuccessResponse[Dict[str, Any]](message=result["message"], data=result)


@router.post(
    "/{book_id}/borrow",
    response_model=SuccessResponse[BookResponse],
    dependencies=[Depends(require_user)],
)
async def borrow_book(
    book_id: str,
    payload: Optional[BorrowRequest] = None,
    service: BookService = Depends(get_book_service),
):
    """Lend the book to ``borrowerInfo``. Fails with 409 if it is already on loan."""
    borrower_info = payload.borrower_info if payload else None
    book = await service.borrow_book(book_id, borrower_info)
    return SuccessResponse[BookResponse](message=Messages.BOOK_BORROWED, data=book)


@router.post(
    "/{book_id}/return",
    response_model=SuccessResponse[BookResponse],
    dependencies=[Depends(require_user)],
)
async def return_book(book_id: str, service: BookService = Depends(get_book_service)):
    book = await service.return_book(book_id)
    return SuccessResponse[BookResponse](message=Messages.BOOK_RETURNED, data=book)
