"""
Common dependencies for FastAPI
"""

from typing import Optional
from fastapi import Depends, Request, UploadFile

from app.core.backend import BackendClient
from app.core.exceptions import ServiceUnavailableException
from app.core.session import SessionContext
from app.schemas.product import ImageUpload
from app.services.session_service import SessionManager

def get_backend(request: Request) -> BackendClient:
    """Backend client created at startup"""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise ServiceUnavailableException("Backend not connected")
    return backend

def get_session_manager(request: Request) -> SessionManager:
    """Process-wide session manager"""
    manager = getattr(request.app.state, "session_manager", None)
    if manager is None:
        raise ServiceUnavailableException("Session not initialised")
    return manager

def get_session(manager: SessionManager = Depends(get_session_manager)) -> SessionContext:
    """Current session context"""
    return manager.context

async def read_image_upload(upload: Optional[UploadFile]) -> Optional[ImageUpload]:
    """
    Read a multipart file into memory

    Returns:
        None when no file was picked
    """
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return ImageUpload(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type,
    )
