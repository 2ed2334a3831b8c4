from library_api.services.author_service import AuthorService
from library_api.services.book_service import BookService
from library_api.services.contact_service import ContactService

__all__ = ["AuthorService", "BookService", "ContactService"]
