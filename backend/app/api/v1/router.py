# backend/app/api/v1/router.py
from fastapi import APIRouter

# Import domain API routers
from app.domains.device.api.device_api import router as device_router

api_router = APIRouter()

api_router.include_router(device_router, prefix="/devices", tags=["Devices"])
