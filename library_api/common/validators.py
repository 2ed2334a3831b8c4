"""
Field validation rules for authors, books and contacts.

Each ``validate_*`` function is pure: it takes the candidate fields (snake_case
keys, only the ones the caller supplied) and an ``is_update`` flag, and returns
a ``ValidationResult`` listing every violated rule in a stable order. Nothing
here touches storage.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from numbers import Real
from typing import Any, List, Mapping, Optional

from library_api.core.db import normalize_id

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ISBN_PATTERN = re.compile(r"^\d{10,17}$")
ISBN_SEPARATORS = re.compile(r"[-\s]")

SOCIAL_MEDIA_HANDLES = ("twitter", "instagram", "facebook", "linkedin")

MIN_PAGES = 1
MAX_PAGES = 10000
MIN_RATING = 0
MAX_RATING = 5


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def is_blank(value: Any) -> bool:
    """True for None, and for strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def normalize_isbn(isbn: str) -> str:
    """Strip hyphens and whitespace so ``978-0-13-468599-1`` and
    ``9780134685991`` compare equal."""
    return ISBN_SEPARATORS.sub("", isbn.strip())


def parse_iso_date(value: Any) -> Optional[date]:
    """Return the date for a ``YYYY-MM-DD`` string, None otherwise."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _check_required(
    errors: List[str],
    data: Mapping[str, Any],
    key: str,
    label: str,
    is_update: bool,
    text: bool = False,
) -> None:
    if is_update:
        if key in data and is_blank(data[key]):
            errors.append(f"{label} cannot be empty")
            return
    elif is_blank(data.get(key)):
        errors.append(f"{label} is required")
        return
    # Fields with their own format rule report a wrong type through that rule
    if text and key in data and not isinstance(data[key], str):
        errors.append(f"{label} must be a string")


def _check_date(
    errors: List[str],
    value: Any,
    format_message: str,
    future_message: Optional[str] = None,
) -> None:
    if is_blank(value):
        return
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        errors.append(format_message)
        return
    parsed = parse_iso_date(value)
    if parsed is None:
        errors.append(f"{value.strip()} is not a valid calendar date")
    elif future_message and parsed > date.today():
        errors.append(future_message)


def _check_email(errors: List[str], value: Any) -> None:
    if is_blank(value):
        return
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
        errors.append("Invalid email format")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_author_data(data: Mapping[str, Any], is_update: bool = False) -> ValidationResult:
    """Validate author fields for creation or a partial update."""
    errors: List[str] = []

    _check_required(errors, data, "name", "Name", is_update, text=True)
    _check_required(errors, data, "bio", "Bio", is_update, text=True)
    _check_required(errors, data, "birth_date", "Birth date", is_update)
    _check_required(errors, data, "nationality", "Nationality", is_update, text=True)

    _check_date(
        errors,
        data.get("birth_date"),
        "Invalid birth date format (should be YYYY-MM-DD)",
        "Birth date cannot be in the future",
    )
    _check_email(errors, data.get("email"))

    website = data.get("website")
    if not is_blank(website) and (
        not isinstance(website, str)
        or not website.strip().startswith(("http://", "https://"))
    ):
        errors.append("Website must start with http:// or https://")

    social_media = data.get("social_media")
    if social_media is not None:
        if not isinstance(social_media, Mapping):
            errors.append("Social media must be an object of handles")
        else:
            unknown = [k for k in social_media if k not in SOCIAL_MEDIA_HANDLES]
            if unknown:
                errors.append(
                    f"Unknown social media handle(s): {', '.join(sorted(unknown))}. "
                    f"Allowed: {', '.join(SOCIAL_MEDIA_HANDLES)}"
                )
            if any(v is not None and not isinstance(v, str) for v in social_media.values()):
                errors.append("Social media handles must be strings")

    awards = data.get("awards")
    if awards is not None:
        if not isinstance(awards, (list, tuple)) or not all(
            isinstance(a, str) for a in awards
        ):
            errors.append("Awards must be a list of strings")
        elif any(is_blank(a) for a in awards):
            errors.append("Awards cannot contain empty values")

    # Null on create falls back to the default, on update it would clear the flag
    if "is_active" in data and not isinstance(data["is_active"], bool):
        if is_update or data["is_active"] is not None:
            errors.append("isActive must be a boolean")

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_book_data(data: Mapping[str, Any], is_update: bool = False) -> ValidationResult:
    """Validate book fields for creation or a partial update."""
    errors: List[str] = []

    _check_required(errors, data, "title", "Title", is_update, text=True)
    _check_required(errors, data, "author_id", "Author ID", is_update)
    _check_required(errors, data, "isbn", "ISBN", is_update)
    _check_required(errors, data, "genre", "Genre", is_update, text=True)
    _check_required(errors, data, "published_date", "Published date", is_update)
    _check_required(errors, data, "description", "Description", is_update, text=True)
    _check_required(errors, data, "total_pages", "Total pages", is_update)

    isbn = data.get("isbn")
    if not is_blank(isbn) and (
        not isinstance(isbn, str) or not ISBN_PATTERN.match(normalize_isbn(isbn))
    ):
        errors.append("Invalid ISBN format (should be 10 to 17 digits)")

    _check_date(
        errors,
        data.get("published_date"),
        "Invalid date format (should be YYYY-MM-DD)",
    )

    total_pages = data.get("total_pages")
    if total_pages is not None and (
        not isinstance(total_pages, int)
        or isinstance(total_pages, bool)
        or not MIN_PAGES <= total_pages <= MAX_PAGES
    ):
        errors.append(f"Total pages must be between {MIN_PAGES} and {MAX_PAGES}")

    if "rating" in data:
        rating = data["rating"]
        if rating is None:
            if is_update:
                errors.append("Rating cannot be empty")
        elif not _is_number(rating) or not MIN_RATING <= rating <= MAX_RATING:
            errors.append(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    author_id = data.get("author_id")
    if not is_blank(author_id) and normalize_id(author_id) is None:
        errors.append("Invalid author ID format")

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_contact_data(data: Mapping[str, Any], is_update: bool = False) -> ValidationResult:
    """Validate contact fields for creation or a partial update."""
    errors: List[str] = []

    _check_required(errors, data, "first_name", "First name", is_update, text=True)
    _check_required(errors, data, "last_name", "Last name", is_update, text=True)
    _check_required(errors, data, "email", "Email", is_update)
    _check_required(errors, data, "favorite_color", "Favorite color", is_update, text=True)
    _check_required(errors, data, "birthday", "Birthday", is_update)

    _check_email(errors, data.get("email"))
    _check_date(
        errors,
        data.get("birthday"),
        "Invalid birthday format (should be YYYY-MM-DD)",
        "Birthday cannot be in the future",
    )

    return ValidationResult(is_valid=not errors, errors=errors)
