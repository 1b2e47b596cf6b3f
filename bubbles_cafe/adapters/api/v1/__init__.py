"""API router configuration.
"""

from fastapi import APIRouter

from .admin.sessions import router as admin_sessions_router
from .auth import router as auth_router
from .csrf import router as csrf_router
from .session_sync import router as session_sync_router

api_router = APIRouter()

api_router.include_router(csrf_router, tags=["csrf"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(session_sync_router, prefix="/session", tags=["session"])
api_router.include_router(admin_sessions_router, prefix="/admin", tags=["admin", "sessions"])
