from library_api.repositories.author_repo import AuthorRepository
from library_api.repositories.base import ListOptions
from library_api.repositories.book_repo import BookRepository
from library_api.repositories.contact_repo import ContactRepository

__all__ = ["AuthorRepository", "BookRepository", "ContactRepository", "ListOptions"]
