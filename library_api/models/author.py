from sqlalchemy import JSON, Boolean, Column, Index, String, Text

from library_api.core.db import Base, UTCDateTime, generate_id


class Author(Base):
    __tablename__ = "authors"
    __table_args__ = (
        Index("idx_authors_name", "name"),
        Index("idx_authors_nationality", "nationality"),
        # Authoritative guard for email uniqueness; NULLs do not collide
        Index("uq_authors_email", "email", unique=True),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=False)
    birth_date = Column(String(10), nullable=False)
    nationality = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)
    social_media = Column(JSON, nullable=False, default=dict)
    awards = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    def __repr__(self):
        return f"<Author(id={self.id}, name='{self.name}')>"
