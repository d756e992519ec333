"""SQLAlchemy model for contact form messages."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.infrastructure.database import Base


class ContactMessageModel(Base):
    """Database representation for messages left through the contact form."""

    __tablename__ = "contact_message"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    urgent = Column(Boolean, nullable=False, default=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False)


__all__ = ["ContactMessageModel"]
