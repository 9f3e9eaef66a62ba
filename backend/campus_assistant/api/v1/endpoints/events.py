from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func
from typing import Dict, List, Optional
from datetime import date, datetime, time, timedelta
from uuid import UUID
from pydantic import BaseModel

from campus_assistant.core.config import settings
from campus_assistant.db.base import get_db
from campus_assistant.db.models import Event
from campus_assistant.services.nlp.datetime_extractor import local_today

router = APIRouter()


# Pydantic schemas
class EventResponse(BaseModel):
    """Event response schema."""
    id: UUID
    title: str
    description: str
    event_date: date
    event_time: time
    location: str
    category: str
    website_url: Optional[str] = None
    registration_link: Optional[str] = None
    organizer: Optional[str] = None
    contact_info: Optional[str] = None
    application_method: Optional[str] = None
    additional_details: Optional[str] = None
    extracted_data: Optional[Dict[str, bool]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventListResponse(BaseModel):
    """Paginated event list response."""
    items: List[EventResponse]
    total: int
    page: int
    size: int
    pages: int


def date_range_for(date_filter: str, today: date):
    """
    Translate a date_filter value into a [start, end) date range.
    end is None for open-ended ranges. Raises ValueError for unknown filters.
    """
    value = date_filter.strip().lower()
    if value == "today":
        return today, today + timedelta(days=1)
    if value == "tomorrow":
        return today + timedelta(days=1), today + timedelta(days=2)
    if value == "week":
        return today, today + timedelta(days=7)
    if value == "upcoming":
        return today, None
    day = datetime.strptime(value, "%Y-%m-%d").date()
    return day, day + timedelta(days=1)


@router.get("/events", response_model=EventListResponse)
async def get_events(
    category: Optional[str] = Query(None, description="Filter by category"),
    date_filter: Optional[str] = Query(None, description="Filter by date: 'today', 'tomorrow', 'week', 'upcoming', or YYYY-MM-DD"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get list of campus events with filters.

    - **category**: Filter by category (case-insensitive)
    - **date_filter**: Filter by date ('today', 'tomorrow', 'week', 'upcoming', or specific date)
    - **page**: Page number for pagination
    - **page_size**: Number of items per page
    """
    query = select(Event).where(Event.is_active == True)

    if date_filter:
        try:
            start, end = date_range_for(date_filter, local_today(settings.TIMEZONE))
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail="Invalid date format. Use YYYY-MM-DD or 'today', 'tomorrow', 'week', 'upcoming'",
            )
        query = query.where(Event.event_date >= start)
        if end is not None:
            query = query.where(Event.event_date < end)

    if category:
        query = query.where(func.lower(Event.category) == category.strip().lower())

    total_result = await db.execute(query.with_only_columns(func.count()).order_by(None))
    total = total_result.scalar()

    offset = (page - 1) * page_size
    query = query.order_by(Event.event_date.asc(), Event.event_time.asc()).limit(page_size).offset(offset)

    result = await db.execute(query)
    events = result.scalars().all()

    pages = max(1, -(-total // page_size))  # ceiling division

    return EventListResponse(
        items=[EventResponse.model_validate(event) for event in events],
        total=total,
        page=page,
        size=page_size,
        pages=pages,
    )


@router.get("/events/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    """Get a specific event by ID."""
    query = select(Event).where(
        and_(
            Event.id == event_id,
            Event.is_active == True
        )
    )
    result = await db.execute(query)
    event = result.scalar_one_or_none()

    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    return event
