from sqlalchemy import Column, Index, String

from library_api.core.db import Base, UTCDateTime, generate_id


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (
        Index("idx_contacts_last_name", "last_name"),
        Index("uq_contacts_email", "email", unique=True),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    favorite_color = Column(String(50), nullable=False)
    birthday = Column(String(10), nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Contact(id={self.id}, email='{self.email}')>"
