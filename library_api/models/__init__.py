from library_api.models.author import Author
from library_api.models.book import Book
from library_api.models.contact import Contact

__all__ = ["Author", "Book", "Contact"]
