from sqlalchemy import Column, String, Boolean, Date, DateTime, Text, Time, JSON, Uuid
from sqlalchemy.sql import func
import uuid
from campus_assistant.db.base import Base


class Event(Base):
    """Campus event, created by an admin from a form or from free text."""
    __tablename__ = "events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(Date, nullable=False, index=True)
    event_time = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    website_url = Column(Text)
    registration_link = Column(Text)
    organizer = Column(String(255))
    contact_info = Column(String(255))
    application_method = Column(Text)
    additional_details = Column(Text)
    raw_text = Column(Text)
    extracted_data = Column(JSON)  # per-field found flags from the extractor
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Resource(Base):
    """Study resource (test paper, timetable, notes)."""
    __tablename__ = "resources"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)
    subject = Column(String(100), nullable=False, index=True)
    url = Column(Text, nullable=False)
    raw_text = Column(Text)
    extracted_data = Column(JSON)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
