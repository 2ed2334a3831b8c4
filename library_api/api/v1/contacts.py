from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from library_api.api.deps import get_contact_service
from library_api.common.pagination import PaginationParams
from library_api.repositories.base import ListOptions
from library_api.schemas.contact import ContactCreate, ContactResponse, ContactUpdate
from library_api.schemas.response import ListResponse, Messages, SuccessResponse
from library_api.services.contact_service import ContactService

router = APIRouter()


@router.get("", response_model=ListResponse[ContactResponse])
async def list_contacts(
    name: Optional[str] = Query(None, description="Substring of first or last name"),
    favorite_color: Optional[str] = Query(None, alias="favoriteColor"),
    pagination: PaginationParams = Depends(),
    service: ContactService = Depends(get_contact_service),
):
    contacts, total = await service.list_contacts(
        {"name": name, "favorite_color": favorite_color},
        ListOptions(
            sort_by=pagination.sort_by,
            sort_order=pagination.sort_order,
            skip=pagination.skip,
            limit=pagination.limit,
        ),
    )
    return ListResponse[ContactResponse](
        message=Messages.CONTACTS_RETRIEVED, data=contacts, meta=pagination.meta(total)
    )


@router.get("/{contact_id}", response_model=SuccessResponse[ContactResponse])
async def get_contact(contact_id: str, service: ContactService = Depends(get_contact_service)):
    contact = await service.get_contact(contact_id)
    return SuccessResponse[ContactResponse](message=Messages.CONTACT_RETRIEVED, data=contact)


@router.post(
    "",
    response_model=SuccessResponse[ContactResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_contact(
    payload: ContactCreate, service: ContactService = Depends(get_contact_service)
):
    contact = await service.create_contact(payload)
    return SuccessResponse[ContactResponse](message=Messages.CONTACT_CREATED, data=contact)


@router.put("/{contact_id}", response_model=SuccessResponse[ContactResponse])
async def update_contact(
    contact_id: str,
    payload: ContactUpdate,
    service: ContactService = Depends(get_contact_service),
):
    contact = await service.update_contact(contact_id, payload)
    return SuccessResponse[ContactResponse](message=Messages.CONTACT_UPDATED, data=contact)


@router.delete("/{contact_id}", response_model=SuccessResponse[Dict[str, Any]])
async def delete_contact(
    contact_id: str, service: ContactService = Depends(get_contact_service)
):
    result = await service.delete_contact(contact_id)
    return SuccessResponse[Dict[str, Any]](message=result["message"], data=result)
