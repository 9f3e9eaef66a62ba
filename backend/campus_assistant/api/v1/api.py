from fastapi import APIRouter
from campus_assistant.api.v1.endpoints import events, resources, admin

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(events.router, tags=["events"])
api_router.include_router(resources.router, tags=["resources"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
