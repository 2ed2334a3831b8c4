from typing import Any, Dict, List, Optional

from sqlalchemy import asc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.db import generate_id, utcnow
from library_api.models.contact import Contact
from library_api.repositories.base import ListOptions, contains, order_clause, store_operation


class ContactRepository:
    SORTABLE = {
        "firstName": Contact.first_name,
        "lastName": Contact.last_name,
        "email": Contact.email,
        "favoriteColor": Contact.favorite_color,
        "birthday": Contact.birthday,
        "createdAt": Contact.created_at,
        "updatedAt": Contact.updated_at,
    }

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("create", "contact", "Contact with this email already exists")
    async def create(self, data: Dict[str, Any]) -> Contact:
        now = utcnow()
        contact = Contact(id=generate_id(), **data, created_at=now, updated_at=now)
        self.db.add(contact)
        await self.db.commit()
        return contact

    @store_operation("read", "contact")
    async def get_by_id(self, contact_id: str) -> Optional[Contact]:
        result = await self.db.execute(select(Contact).where(Contact.id == contact_id))
        return result.scalars().first()

    @store_operation("read", "contact")
    async def get_by_email(
        self, email: str, exclude_id: Optional[str] = None
    ) -> Optional[Contact]:
        query = select(Contact).where(Contact.email == email)
        if exclude_id:
            query = query.where(Contact.id != exclude_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    def _conditions(self, filters: Dict[str, Any]) -> List[Any]:
        conditions = []
        if filters.get("name"):
            conditions.append(
                or_(
                    contains(Contact.first_name, filters["name"]),
                    contains(Contact.last_name, filters["name"]),
                )
            )
        if filters.get("favorite_color"):
            conditions.append(contains(Contact.favorite_color, filters["favorite_color"]))
        return conditions

    @store_operation("list", "contact")
    async def list(self, filters: Dict[str, Any], options: ListOptions) -> List[Contact]:
        query = select(Contact).where(*self._conditions(filters))

        if options.sort_by:
            query = query.order_by(
                order_clause(self.SORTABLE, options, "contacts"), asc(Contact.id)
            )
        else:
            query = query.order_by(
                asc(Contact.last_name), asc(Contact.first_name), asc(Contact.id)
            )

        if options.skip:
            query = query.offset(options.skip)
        if options.limit:
            query = query.limit(options.limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    @store_operation("count", "contact")
    async def count(self, filters: Dict[str, Any]) -> int:
        query = select(func.count(Contact.id)).where(*self._conditions(filters))
        result = await self.db.execute(query)
        return result.scalar_one()

    @store_operation("update", "contact", "Another contact with this email already exists")
    async def update(self, contact: Contact, data: Dict[str, Any]) -> Contact:
        for key, value in data.items():
            setattr(contact, key, value)
        contact.updated_at = utcnow()
        await self.db.commit()
        return contact

    @store_operation("delete", "contact")
    async def delete(self, contact: Contact) -> None:
        await self.db.delete(contact)
        await self.db.commit()
