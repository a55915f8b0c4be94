"""Health check route."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Report that the service is up. Never wrapped in a layout."""
    return {"status": "healthy"}
