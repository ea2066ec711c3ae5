"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers.  The teacher routes use
flat paths (``/register``, ``/commonstudents``, ``/suspend``,
``/retrievefornotifications``), so they are included without a prefix
of their own.
"""

from fastapi import APIRouter

from .endpoints import health, teachers

router = APIRouter()

router.include_router(teachers.router, tags=["teachers"])
router.include_router(health.router, tags=["health"])
