from fastapi import APIRouter

from library_api.api.v1 import authors, books

api_router = APIRouter()
api_router.include_router(authors.router, prefix="/authors", tags=["Authors"])
api_router.include_router(books.router, prefix="/books", tags=["Books"])
