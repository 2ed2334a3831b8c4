from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

# Generic type for data payload
T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response schema with message support"""

    success: bool = True
    message: str
    data: Optional[T] = None
    errors: Optional[List[str]] = None
    meta: Optional[Dict[str, Any]] = None


class SuccessResponse(APIResponse[T], Generic[T]):
    """Success response with data"""

    message: str = "Operation completed successfully"


class ListResponse(APIResponse[List[T]], Generic[T]):
    """Response for list operations"""

    message: str = "Data retrieved successfully"


# Specific success messages for different operations
class Messages:
    # Author messages
    AUTHOR_CREATED = "Author created successfully"
    AUTHOR_UPDATED = "Author updated successfully"
    AUTHOR_DELETED = "Author deleted successfully"
    AUTHOR_RETRIEVED = "Author retrieved successfully"
    AUTHORS_RETRIEVED = "Authors retrieved successfully"
    AWARD_ADDED = "Award added successfully"

    # Book messages
    BOOK_CREATED = "Book created successfully"
    BOOK_UPDATED = "Book updated successfully"
    BOOK_DELETED = "Book deleted successfully"
    BOOK_RETRIEVED = "Book retrieved successfully"
    BOOKS_RETRIEVED = "Books retrieved successfully"
    BOOK_BORROWED = "Book borrowed successfully"
    BOOK_RETURNED = "Book returned successfully"

    # Contact messages
    CONTACT_CREATED = "Contact created successfully"
    CONTACT_UPDATED = "Contact updated successfully"
    CONTACT_DELETED = "Contact deleted successfully"
    CONTACT_RETRIEVED = "Contact retrieved successfully"
    CONTACTS_RETRIEVED = "Contacts retrieved successfully"
