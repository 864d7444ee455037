"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from waybinder.api.v1.routes import gps

api_router = APIRouter()

api_router.include_router(gps.router, prefix="/gps", tags=["GPS"])
