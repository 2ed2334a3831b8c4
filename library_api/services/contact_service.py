from typing import Any, Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.common.validators import validate_contact_data
from library_api.core.db import normalize_id
from library_api.core.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from library_api.logging import get_logger
from library_api.models.contact import Contact
from library_api.repositories.base import ListOptions
from library_api.repositories.contact_repo import ContactRepository
from library_api.schemas.contact import ContactCreate, ContactResponse, ContactUpdate

logger = get_logger(__name__)


def normalize_contact_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    normalized = {key: value.strip() for key, value in data.items()}
    if "email" in normalized:
        normalized["email"] = normalized["email"].lower()
    return normalized


class ContactService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.contact_repo = ContactRepository(db)

    async def _get_or_404(self, contact_id: str) -> Contact:
        normalized = normalize_id(contact_id)
        contact = await self.contact_repo.get_by_id(normalized) if normalized else None
        if contact is None:
            raise NotFoundException(
                "Contact not found", resource_type="contact", resource_id=contact_id
            )
        return contact

    async def list_contacts(
        self, filters: Dict[str, Any], options: ListOptions
    ) -> Tuple[List[ContactResponse], int]:
        contacts = await self.contact_repo.list(filters, options)
        total = await self.contact_repo.count(filters)
        return [ContactResponse.model_validate(c) for c in contacts], total

    async def get_contact(self, contact_id: str) -> ContactResponse:
        contact = await self._get_or_404(contact_id)
        return ContactResponse.model_validate(contact)

    async def create_contact(self, payload: ContactCreate) -> ContactResponse:
        """
        Create a contact.

        Raises:
            ValidationException: With every violated rule
            ConflictException: If the email is already taken
        """
        data = payload.model_dump(exclude_unset=True)
        result = validate_contact_data(data)
        if not result.is_valid:
            raise ValidationException(result.errors, resource_type="contact")

        data = normalize_contact_fields(data)
        if await self.contact_repo.get_by_email(data["email"]):
            raise ConflictException(
                "Contact with this email already exists", resource_type="contact"
            )

        contact = await self.contact_repo.create(data)
        logger.info(f"Created contact {contact.id}")
        return ContactResponse.model_validate(contact)

    async def update_contact(self, contact_id: str, payload: ContactUpdate) -> ContactResponse:
        """Merge the supplied fields into an existing contact."""
        if normalize_id(contact_id) is None:
            raise NotFoundException(
                "Contact not found", resource_type="contact", resource_id=contact_id
            )

        data = payload.model_dump(exclude_unset=True)
        result = validate_contact_data(data, is_update=True)
        if not result.is_valid:
            raise ValidationException(result.errors, resource_type="contact")

        contact = await self._get_or_404(contact_id)
        data = normalize_contact_fields(data)

        if "email" in data and await self.contact_repo.get_by_email(
            data["email"], exclude_id=contact.id
        ):
            raise ConflictException(
                "Another contact with this email already exists",
                resource_type="contact",
                resource_id=contact.id,
            )

        contact = await self.contact_repo.update(contact, data)
        logger.info(f"Updated contact {contact.id}: {sorted(data)}")
        return ContactResponse.model_validate(contact)

    async def delete_contact(self, contact_id: str) -> Dict[str, Any]:
        contact = await self._get_or_404(contact_id)
        full_name = contact.full_name
        await self.contact_repo.delete(contact)
        logger.info(f"Deleted contact {contact_id}")
        return {"message": "Contact deleted successfully", "deletedContact": full_name}
