"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified prefix.
Everything below ``/admin`` is mounted behind a single role check, so
an unauthenticated request to any admin path is rejected with 401
before its handler runs.
"""

from fastapi import APIRouter, Depends

from ...core.security import require_admin
from .endpoints import (
    admin_content,
    admin_dashboard,
    admin_events,
    admin_interviews,
    admin_media,
    admin_messages,
    admin_payments,
    admin_settings,
    admin_submissions,
    admin_trips,
    admin_users,
    auth,
    content,
    events,
    interviews,
    media,
    queries,
    setup,
    trips,
    upload,
    user,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(setup.router, prefix="/setup", tags=["setup"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(trips.router, prefix="/trips", tags=["trips"])
router.include_router(interviews.router, prefix="/interviews", tags=["interviews"])
router.include_router(content.router, prefix="/content", tags=["content"])
router.include_router(media.router, prefix="/media", tags=["media"])
router.include_router(queries.router, prefix="/queries", tags=["queries"])
router.include_router(user.router, prefix="/user", tags=["user"])
router.include_router(upload.router, prefix="/upload", tags=["upload"])

admin_router = APIRouter(dependencies=[Depends(require_admin)])
admin_router.include_router(admin_dashboard.router)
admin_router.include_router(admin_users.router, prefix="/users")
admin_router.include_router(admin_events.router, prefix="/events")
admin_router.include_router(admin_trips.router, prefix="/trips")
admin_router.include_router(admin_interviews.router, prefix="/interviews")
admin_router.include_router(admin_submissions.router, prefix="/interview-submissions")
admin_router.include_router(admin_payments.router, prefix="/payments")
admin_router.include_router(admin_messages.messages_router, prefix="/messages")
admin_router.include_router(admin_messages.queries_router, prefix="/queries")
admin_router.include_router(admin_content.router, prefix="/content")
admin_router.include_router(admin_settings.router, prefix="/settings")
admin_router.include_router(admin_media.router, prefix="/media")

router.include_router(admin_router, prefix="/admin", tags=["admin"])
