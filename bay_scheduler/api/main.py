from fastapi import APIRouter

from .routes import bay_schedule, health

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])

# Bay schedule layout and validation
api_router.include_router(
    bay_schedule.router, prefix="/bay-schedule", tags=["bay-schedule"]
)
