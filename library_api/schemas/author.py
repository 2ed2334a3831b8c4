from datetime import datetime
from typing import Any, List, Optional

from library_api.schemas.base import CamelModel


class SocialMedia(CamelModel):
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None


class AuthorCreate(CamelModel):
    """Candidate author fields.

    Fields are untyped and optional so that missing fields, wrong types and
    broken rules are all reported together by the validators.
    """

    name: Any = None
    bio: Any = None
    birth_date: Any = None
    nationality: Any = None
    email: Any = None
    website: Any = None
    social_media: Any = None
    awards: Any = None
    is_active: Any = None


class AuthorUpdate(AuthorCreate):
    """Patch for an author: only fields present in the payload are merged."""


class AwardCreate(CamelModel):
    award: Any = None


class AuthorInDB(CamelModel):
    id: str
    name: str
    bio: str
    birth_date: str
    nationality: str
    email: Optional[str] = None
    website: Optional[str] = None
    social_media: SocialMedia = SocialMedia()
    awards: List[str] = []
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class AuthorBookBrief(CamelModel):
    id: str
    title: str
    isbn: str
    availability: bool


class AuthorResponse(AuthorInDB):
    book_count: int = 0
    book_titles: List[str] = []


class AuthorDetailResponse(AuthorResponse):
    books: List[AuthorBookBrief] = []
