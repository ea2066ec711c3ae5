"""
Health check endpoint for API v1.
"""

from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    """Liveness check; does not touch the database."""
    return {"status": "ok"}
