"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Report that the API process is up; does not touch the database."""
    return {"status": "ok"}
