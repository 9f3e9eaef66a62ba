from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class RecordKind(str, Enum):
    EVENT = "event"
    RESOURCE = "resource"


class EventRecord(BaseModel):
    """A complete, validated event. Every required field is non-empty."""
    title: str
    description: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM, 24-hour
    location: str
    category: str
    website_url: Optional[str] = None
    registration_link: Optional[str] = None
    organizer: Optional[str] = None
    contact_info: Optional[str] = None
    application_method: Optional[str] = None
    additional_details: Optional[str] = None
    extracted_data: Dict[str, bool] = Field(default_factory=dict)

    @property
    def starts_at(self) -> str:
        return f"{self.date} {self.time}"


class ResourceRecord(BaseModel):
    """A complete, validated study resource."""
    title: str
    description: str
    type: str
    subject: str
    url: str
    extracted_data: Dict[str, bool] = Field(default_factory=dict)
