#!/usr/bin/env python3
"""
Sample data seeding script.

Loads a handful of authors, books and contacts through the services, so the
same validation and integrity rules apply as for API writes. A collection that
already holds data is left untouched.

Usage:
    python scripts/seed.py
"""

import asyncio
import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from library_api.core.config import get_settings
from library_api.core.db import Database, create_database
from library_api.core.exceptions import LibraryException
from library_api.logging import get_logger, setup_logging
from library_api.repositories import AuthorRepository, ContactRepository
from library_api.schemas.author import AuthorCreate
from library_api.schemas.book import BookCreate
from library_api.schemas.contact import ContactCreate
from library_api.services import AuthorService, BookService, ContactService

logger = get_logger("seed")

SAMPLE_CONTACTS = [
    {"firstName": "Alice", "lastName": "Johnson", "email": "alice.johnson@email.com",
     "favoriteColor": "Purple", "birthday": "1992-03-12"},
    {"firstName": "Bob", "lastName": "Smith", "email": "bob.smith@email.com",
     "favoriteColor": "Red", "birthday": "1988-07-25"},
    {"firstName": "Carol", "lastName": "Davis", "email": "carol.davis@email.com",
     "favoriteColor": "Green", "birthday": "1995-11-08"},
    {"firstName": "David", "lastName": "Wilson", "email": "david.wilson@email.com",
     "favoriteColor": "Blue", "birthday": "1990-01-18"},
    {"firstName": "Eva", "lastName": "Brown", "email": "eva.brown@email.com",
     "favoriteColor": "Yellow", "birthday": "1993-09-30"},
]

# Each author is followed by the books seeded for them
SAMPLE_AUTHORS = [
    (
        {
            "name": "Ursula K. Le Guin",
            "bio": "American author of speculative fiction, essays and poetry.",
            "birthDate": "1929-10-21",
            "nationality": "American",
            "website": "https://www.ursulakleguin.com",
            "awards": ["Hugo Award", "Nebula Award"],
        },
        [
            {
                "title": "A Wizard of Earthsea",
                "isbn": "978-0-547-77374-3",
                "genre": "Fantasy",
                "publishedDate": "1968-11-01",
                "description": "A young wizard confronts the shadow he released.",
                "totalPages": 183,
                "rating": 4.5,
            },
            {
                "title": "The Left Hand of Darkness",
                "isbn": "978-0-441-47812-5",
                "genre": "Science Fiction",
                "publishedDate": "1969-03-01",
                "description": "An envoy on the ice world of Gethen.",
                "totalPages": 304,
                "rating": 4.3,
            },
        ],
    ),
    (
        {
            "name": "Chinua Achebe",
            "bio": "Nigerian novelist, poet and critic.",
            "birthDate": "1930-11-16",
            "nationality": "Nigerian",
            "awards": ["Man Booker International Prize"],
        },
        [
            {
                "title": "Things Fall Apart",
                "isbn": "978-0-385-47454-2",
                "genre": "Literary Fiction",
                "publishedDate": "1958-06-17",
                "description": "The life and fall of Okonkwo in an Igbo village.",
                "totalPages": 209,
                "rating": 4.2,
            },
        ],
    ),
    (
        {
            "name": "Italo Calvino",
            "bio": "Italian journalist and writer of short stories and novels.",
            "birthDate": "1923-10-15",
            "nationality": "Italian",
        },
        [
            {
                "title": "Invisible Cities",
                "isbn": "978-0-15-645380-6",
                "genre": "Literary Fiction",
                "publishedDate": "1972-11-01",
                "description": "Marco Polo describes imagined cities to Kublai Khan.",
                "totalPages": 165,
                "rating": 4.4,
            },
        ],
    ),
]


async def seed_contacts(database: Database) -> int:
    async with database.session() as session:
        existing = await ContactRepository(session).count({})
        if existing:
            logger.info(f"Database already contains {existing} contacts, skipping")
            return 0

        service = ContactService(session)
        for data in SAMPLE_CONTACTS:
            contact = await service.create_contact(ContactCreate.model_validate(data))
            logger.info(f"Created contact {contact.first_name} {contact.last_name}")
        return len(SAMPLE_CONTACTS)


async def seed_library(database: Database) -> int:
    async with database.session() as session:
        existing = await AuthorRepository(session).count({})
        if existing:
            logger.info(f"Database already contains {existing} authors, skipping")
            return 0

        author_service = AuthorService(session)
        book_service = BookService(session)
        created = 0
        for author_data, books in SAMPLE_AUTHORS:
            author = await author_service.create_author(AuthorCreate.model_validate(author_data))
            for book_data in books:
                payload = BookCreate.model_validate({**book_data, "authorId": author.id})
                book = await book_service.create_book(payload)
                logger.info(f"Created book {book.title} by {author.name}")
                created += 1
            created += 1
        return created


async def main() -> int:
    settings = get_settings()
    setup_logging(settings)

    database = create_database(settings)
    try:
        await database.connect()
        contacts = await seed_contacts(database)
        records = await seed_library(database)
    except LibraryException as e:
        logger.error(f"Seeding failed: {e}")
        return 1
    finally:
        await database.dispose()

    logger.info(f"Seeding complete: {contacts} contacts, {records} authors and books")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
