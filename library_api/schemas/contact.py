from datetime import datetime
from typing import Any

from library_api.schemas.base import CamelModel


class ContactCreate(CamelModel):
    first_name: Any = None
    last_name: Any = None
    email: Any = None
    favorite_color: Any = None
    birthday: Any = None


class ContactUpdate(ContactCreate):
    pass


class ContactResponse(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    favorite_color: str
    birthday: str
    created_at: datetime
    updated_at: datetime
