from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func
from typing import Dict, List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel

from campus_assistant.db.base import get_db
from campus_assistant.db.models import Resource

router = APIRouter()


class ResourceResponse(BaseModel):
    """Resource response schema."""
    id: UUID
    title: str
    description: str
    type: str
    subject: str
    url: str
    extracted_data: Optional[Dict[str, bool]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResourceListResponse(BaseModel):
    items: List[ResourceResponse]
    total: int
    page: int
    size: int
    pages: int


@router.get("/resources", response_model=ResourceListResponse)
async def get_resources(
    type: Optional[str] = Query(None, description="Filter by resource type, e.g. 'Test Paper'"),
    subject: Optional[str] = Query(None, description="Filter by subject"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """List active study resources, newest first."""
    query = select(Resource).where(Resource.is_active == True)
    if type:
        query = query.where(func.lower(Resource.type) == type.strip().lower())
    if subject:
        query = query.where(func.lower(Resource.subject) == subject.strip().lower())

    total = (await db.execute(query.with_only_columns(func.count()).order_by(None))).scalar()

    query = query.order_by(Resource.created_at.desc(), Resource.title.asc())
    query = query.limit(page_size).offset((page - 1) * page_size)
    result = await db.execute(query)

    return ResourceListResponse(
        items=[ResourceResponse.model_validate(r) for r in result.scalars().all()],
        total=total,
        page=page,
        size=page_size,
        pages=max(1, -(-total // page_size)),
    )


@router.get("/resources/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(Resource).where(and_(Resource.id == resource_id, Resource.is_active == True))
    )
    resource = result.scalar_one_or_none()
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource
