"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, status

from app.core.session import SessionContext
from app.schemas.user import (
    MessageResponse,
    NewPasswordRequest,
    PasswordResetRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from app.services.session_service import SessionManager
from app.utils.dependencies import get_session, get_session_manager

router = APIRouter()

def _session_response(context: SessionContext) -> SessionResponse:
    identity = context.identity
    return SessionResponse(
        authenticated=identity is not None,
        loading=context.loading,
        user=identity,
        greeting=identity.display_name if identity else None,
    )

@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new account",
    description="Create an account; the caller still has to log in afterwards"
)
async def sign_up(
    request: SignUpRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """Register new user"""
    message = await manager.sign_up(
        request.name, request.phone, request.email, request.password
    )
    return MessageResponse(message=message)

@router.post(
    "/login",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
    description="Login with email and password"
)
async def login(
    request: SignInRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """Login user"""
    await manager.sign_in(request.email, request.password)
    return _session_response(manager.context)

@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout user"
)
async def logout(manager: SessionManager = Depends(get_session_manager)):
    """Clear the current session"""
    await manager.sign_out()
    return None

@router.post(
    "/password-reset",
    response_model=MessageResponse,
    summary="Send password reset link"
)
async def request_password_reset(
    request: PasswordResetRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """Email a reset link"""
    message = await manager.request_password_reset(request.email)
    return MessageResponse(message=message)

@router.post(
    "/password",
    response_model=MessageResponse,
    summary="Set new password",
    description="Set a new password on the session opened by the reset link"
)
async def set_new_password(
    request: NewPasswordRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    message = await manager.commit_new_password(request.password, request.confirm_password)
    return MessageResponse(message=message)

@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Get current session"
)
async def get_me(context: SessionContext = Depends(get_session)):
    return _session_response(context)
