from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from library_api.api.deps import get_author_service
from library_api.common.pagination import PaginationParams
from library_api.repositories.base import ListOptions
from library_api.schemas.author import (
    AuthorCreate,
    AuthorDetailResponse,
    AuthorResponse,
    AuthorUpdate,
    AwardCreate,
)
from library_api.schemas.response import ListResponse, Messages, SuccessResponse
from library_api.services.author_service import AuthorService

router = APIRouter()


@router.get("", response_model=ListResponse[AuthorResponse])
async def list_authors(
    name: Optional[str] = Query(None, description="Substring of the author's name"),
    nationality: Optional[str] = Query(None, description="Substring of the nationality"),
    pagination: PaginationParams = Depends(),
    service: AuthorService = Depends(get_author_service),
):
    """
    List authors with their book counts and titles.

    - **name**, **nationality**: case-insensitive substring filters
    - **sortBy**: name, nationality, birthDate, email, bookCount, createdAt, updatedAt
    - **sortOrder**: asc or desc
    - **page**, **limit**: paging, limit is capped
    """
    authors, total = await service.list_authors(
        {"name": name, "nationality": nationality},
        ListOptions(
            sort_by=pagination.sort_by,
            sort_order=pagination.sort_order,
            skip=pagination.skip,
            limit=pagination.limit,
        ),
    )
    return ListResponse[AuthorResponse](
        message=Messages.AUTHORS_RETRIEVED, data=authors, meta=pagination.meta(total)
    )


@router.get("/{author_id}", response_model=SuccessResponse[AuthorDetailResponse])
async def get_author(author_id: str, service: AuthorService = Depends(get_author_service)):
    author = await service.get_author(author_id)
    return SuccessResponse[AuthorDetailResponse](message=Messages.AUTHOR_RETRIEVED, data=author)


@router.post(
    "",
    response_model=SuccessResponse[AuthorResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_author(
    payload: AuthorCreate, service: AuthorService = Depends(get_author_service)
):
    author = await service.create_author(payload)
    return SuccessResponse[AuthorResponse](message=Messages.AUTHOR_CREATED, data=author)


@router.put("/{author_id}", response_model=SuccessResponse[AuthorResponse])
async def update_author(
    author_id: str,
    payload: AuthorUpdate,
    service: AuthorService = Depends(get_author_service),
):
    """Update only the fields present in the body."""
    author = await service.update_author(author_id, payload)
    return SuccessResponse[AuthorResponse](message=Messages.AUTHOR_UPDATED, data=author)


@router.delete("/{author_id}", response_model=SuccessResponse[Dict[str, Any]])
async def delete_author(author_id: str, service: AuthorService = Depends(get_author_service)):
    """Delete an author. Fails with 409 while any book references them."""
    result = await service.delete_author(author_id)
    return SuccessResponse[Dict[str, Any]](message=result["message"], data=result)


@router.post("/{author_id}/awards", response_model=SuccessResponse[AuthorResponse])
async def add_award(
    author_id: str,
    payload: AwardCreate,
    service: AuthorService = Depends(get_author_service),
):
    author = await service.add_award(author_id, payload.award)
    return SuccessResponse[AuthorResponse](message=Messages.AWARD_ADDED, data=author)
