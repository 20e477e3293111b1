"""
API v1 Router
"""

from fastapi import APIRouter
from . import collaborations

router = APIRouter()

router.include_router(
    collaborations.router, prefix="/collaborations", tags=["Collaborations"]
)


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/collaborations",
            "/collaborations/bulk",
            "/collaborations/copy",
            "/collaborations/duplicates",
            "/collaborations/responsible",
        ],
    }
