from sqlalchemy import Boolean, Column, Float, Index, Integer, String, Text

from library_api.core.db import Base, UTCDateTime, generate_id


class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        Index("idx_books_author_id", "author_id"),
        Index("idx_books_genre", "genre"),
        Index("idx_books_created_at", "created_at"),
        Index("uq_books_isbn", "isbn", unique=True),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String(500), nullable=False)
    # Plain reference, no FOREIGN KEY: integrity is checked by the service
    author_id = Column(String(32), nullable=False)
    isbn = Column(String(17), nullable=False)
    genre = Column(String(100), nullable=False)
    published_date = Column(String(10), nullable=False)
    description = Column(Text, nullable=False)
    total_pages = Column(Integer, nullable=False)
    rating = Column(Float, nullable=False, default=0.0)

    # Lending state: availability is False exactly when borrowed_by is set
    availability = Column(Boolean, nullable=False, default=True)
    borrowed_by = Column(String(255), nullable=True)
    borrowed_date = Column(UTCDateTime, nullable=True)
    return_due_date = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    @property
    def is_on_loan(self) -> bool:
        return not self.availability or self.borrowed_by is not None

    def __repr__(self):
        return f"<Book(id={self.id}, title='{self.title}')>"
