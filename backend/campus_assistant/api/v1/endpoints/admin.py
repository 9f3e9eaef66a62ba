from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Any, Dict, Optional
from pydantic import BaseModel
from datetime import date, time
from uuid import UUID
import logging

from campus_assistant.api.v1.endpoints.events import EventResponse
from campus_assistant.api.v1.endpoints.resources import ResourceResponse
from campus_assistant.core.config import settings
from campus_assistant.db.base import get_db
from campus_assistant.db.models import Event, Resource
from campus_assistant.services.nlp.datetime_extractor import split_datetime
from campus_assistant.services.nlp.extractor import FieldExtractor
from campus_assistant.services.nlp.records import EventRecord, RecordKind, ResourceRecord

logger = logging.getLogger(__name__)

router = APIRouter()

extractor = FieldExtractor(settings)


def verify_admin_key(x_admin_key: str = Header(...)):
    """Verify admin API key from header."""
    if x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin key")
    return True


# ── Request schemas ──────────────────────────────────────────────────────────

class ExtractRequest(BaseModel):
    text: str
    kind: RecordKind = RecordKind.EVENT


class EventFields(BaseModel):
    """Event fields as an admin form submits them; every field is optional."""
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD, or "YYYY-MM-DD HH:MM"
    time: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    website_url: Optional[str] = None
    registration_link: Optional[str] = None
    organizer: Optional[str] = None
    contact_info: Optional[str] = None
    application_method: Optional[str] = None
    additional_details: Optional[str] = None


class EventCreate(EventFields):
    text: Optional[str] = None  # natural-language announcement


class ResourceFields(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    subject: Optional[str] = None
    url: Optional[str] = None


class ResourceCreate(ResourceFields):
    text: Optional[str] = None


# ── Helpers ──────────────────────────────────────────────────────────────────

def _given_fields(body: BaseModel) -> Dict[str, Any]:
    """Fields the caller actually sent, minus the free-text input."""
    return {k: v for k, v in body.model_dump(exclude_unset=True).items() if k != "text" and v is not None}


def _split_event_datetime(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Split a combined "YYYY-MM-DD HH:MM" date so its time is not lost when merging."""
    split_date, split_time = split_datetime(fields.get("date"))
    if split_date:
        fields["date"] = split_date
        if split_time:
            fields.setdefault("time", split_time)
    return fields


def _partial_from_body(kind: RecordKind, body: BaseModel) -> Dict[str, Any]:
    """
    Build a pre-validation record from a create request.
    Free text is run through the extractor; explicit fields override it.
    """
    fields = _given_fields(body)
    text = (body.text or "").strip()
    if not text and not fields:
        raise HTTPException(status_code=400, detail="Provide 'text' or at least one field")

    partial: Dict[str, Any] = extractor.extract_partial(text, kind) if text else {}
    partial.update(fields)
    return partial


def _apply_event_record(event: Event, record: EventRecord):
    event.title = record.title
    event.description = record.description
    event.event_date = date.fromisoformat(record.date)
    event.event_time = time.fromisoformat(record.time)
    event.location = record.location
    event.category = record.category
    event.website_url = record.website_url
    event.registration_link = record.registration_link
    event.organizer = record.organizer
    event.contact_info = record.contact_info
    event.application_method = record.application_method
    event.additional_details = record.additional_details
    event.extracted_data = record.extracted_data


def _apply_resource_record(resource: Resource, record: ResourceRecord):
    resource.title = record.title
    resource.description = record.description
    resource.type = record.type
    resource.subject = record.subject
    resource.url = record.url
    resource.extracted_data = record.extracted_data


def _event_as_partial(event: Event) -> Dict[str, Any]:
    return {
        "title": event.title,
        "description": event.description,
        "date": event.event_date.isoformat() if event.event_date else None,
        "time": event.event_time.strftime("%H:%M") if event.event_time else None,
        "location": event.location,
        "category": event.category,
        "website_url": event.website_url,
        "registration_link": event.registration_link,
        "organizer": event.organizer,
        "contact_info": event.contact_info,
        "application_method": event.application_method,
        "additional_details": event.additional_details,
        "extracted_data": event.extracted_data,
    }


def _resource_as_partial(resource: Resource) -> Dict[str, Any]:
    return {
        "title": resource.title,
        "description": resource.description,
        "type": resource.type,
        "subject": resource.subject,
        "url": resource.url,
        "extracted_data": resource.extracted_data,
    }


async def _get_active(db: AsyncSession, model, record_id: UUID, label: str):
    result = await db.execute(select(model).where(model.id == record_id, model.is_active == True))
    row = result.scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


# ── Extraction preview ───────────────────────────────────────────────────────

@router.post("/extract")
async def extract_preview(
    body: ExtractRequest,
    _: bool = Depends(verify_admin_key)
):
    """Run the field extractor over text and return the record without storing it."""
    record = extractor.extract(body.text, body.kind)
    return {"kind": body.kind.value, "record": record.model_dump()}


# ── Events ───────────────────────────────────────────────────────────────────

@router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    """Create an event from natural-language text and/or explicit fields."""
    record = extractor.validator.validate(RecordKind.EVENT, _partial_from_body(RecordKind.EVENT, body))

    event = Event(raw_text=body.text or None, is_active=True)
    _apply_event_record(event, record)
    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info(f"Created event {event.id}: {event.title!r} on {record.starts_at}")
    return event


@router.put("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    body: EventFields,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    """Merge the given fields onto a stored event and re-validate it."""
    event = await _get_active(db, Event, event_id, "Event")

    partial = _event_as_partial(event)
    partial.update(_split_event_datetime(_given_fields(body)))
    record = extractor.validator.validate(RecordKind.EVENT, partial)

    _apply_event_record(event, record)
    await db.commit()
    await db.refresh(event)

    logger.info(f"Updated event {event.id}")
    return event


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    """Soft-delete an event."""
    event = await _get_active(db, Event, event_id, "Event")
    event.is_active = False
    await db.commit()

    logger.info(f"Deactivated event {event_id}")
    return {"message": f"Event {event_id} deleted successfully"}


# ── Resources ────────────────────────────────────────────────────────────────

@router.post("/resources", response_model=ResourceResponse, status_code=201)
async def create_resource(
    body: ResourceCreate,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    """Create a study resource from natural-language text and/or explicit fields."""
    record = extractor.validator.validate(RecordKind.RESOURCE, _partial_from_body(RecordKind.RESOURCE, body))

    resource = Resource(raw_text=body.text or None, is_active=True)
    _apply_resource_record(resource, record)
    db.add(resource)
    await db.commit()
    await db.refresh(resource)

    logger.info(f"Created resource {resource.id}: {resource.title!r} ({resource.type}/{resource.subject})")
    return resource


@router.put("/resources/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: UUID,
    body: ResourceFields,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    resource = await _get_active(db, Resource, resource_id, "Resource")

    partial = _resource_as_partial(resource)
    partial.update(_given_fields(body))
    record = extractor.validator.validate(RecordKind.RESOURCE, partial)

    _apply_resource_record(resource, record)
    await db.commit()
    await db.refresh(resource)

    logger.info(f"Updated resource {resource.id}")
    return resource


@router.delete("/resources/{resource_id}")
async def delete_resource(
    resource_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    """Soft-delete a resource."""
    resource = await _get_active(db, Resource, resource_id, "Resource")
    resource.is_active = False
    await db.commit()

    logger.info(f"Deactivated resource {resource_id}")
    return {"message": f"Resource {resource_id} deleted successfully"}


# ── Stats ────────────────────────────────────────────────────────────────────

@router.get("/stats")
async def get_stats(
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(verify_admin_key)
):
    """Counts of active events per category and active resources per type."""
    events_result = await db.execute(
        select(Event.category, func.count()).where(Event.is_active == True).group_by(Event.category)
    )
    events_by_category = {category: count for category, count in events_result.all()}

    resources_result = await db.execute(
        select(Resource.type, func.count()).where(Resource.is_active == True).group_by(Resource.type)
    )
    resources_by_type = {resource_type: count for resource_type, count in resources_result.all()}

    return {
        "events": {
            "total": sum(events_by_category.values()),
            "by_category": events_by_category,
        },
        "resources": {
            "total": sum(resources_by_type.values()),
            "by_type": resources_by_type,
        },
    }
