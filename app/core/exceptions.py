"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

class MarketplaceException(HTTPException):
    """Base exception class for the marketplace application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(MarketplaceException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(MarketplaceException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code
        )

class ForbiddenException(MarketplaceException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(MarketplaceException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(MarketplaceException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class ValidationException(MarketplaceException):
    """422 Unprocessable Entity"""

    def __init__(self, detail: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=error_code
        )

class BackendException(MarketplaceException):
    """502 Bad Gateway - the backend service reported an error"""

    def __init__(self, detail: str, error_code: str = "BACKEND_ERROR"):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code=error_code
        )

class ServiceUnavailableException(MarketplaceException):
    """503 Service Unavailable"""

    def __init__(
        self,
        detail: str = "Service temporarily unavailable",
        error_code: str = "SERVICE_UNAVAILABLE"
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class LoginRequiredException(UnauthorizedException):
    """Action needs a signed-in identity"""

    def __init__(self, action: str = "continue"):
        super().__init__(
            detail=f"Please login to {action}",
            error_code="LOGIN_REQUIRED"
        )

class InvalidCredentialsException(UnauthorizedException):
    """Sign-in rejected by the backend"""

    def __init__(self, detail: str = "Invalid login credentials"):
        super().__init__(
            detail=detail,
            error_code="INVALID_CREDENTIALS"
        )

class EmailAlreadyRegisteredException(ConflictException):
    """Email is already used by another account"""

    def __init__(self):
        super().__init__(
            detail="This email is already registered. Please login or use a different email.",
            error_code="EMAIL_ALREADY_REGISTERED"
        )

class PhoneAlreadyRegisteredException(ConflictException):
    """Phone number is already used by another account"""

    def __init__(self):
        super().__init__(
            detail="This phone number is already registered. Please use a different number.",
            error_code="PHONE_ALREADY_REGISTERED"
        )

class NotOwnerException(ForbiddenException):
    """Caller does not own the resource"""

    def __init__(self, detail: str = "You can only edit your own products!"):
        super().__init__(
            detail=detail,
            error_code="NOT_OWNER"
        )

class ImageTooLargeException(ValidationException):
    """Selected image exceeds the upload limit"""

    def __init__(self, detail: str = "Image size should be less than 5MB"):
        super().__init__(
            detail=detail,
            error_code="IMAGE_TOO_LARGE"
        )

class ConfirmationRequiredException(BadRequestException):
    """Destructive action was not confirmed"""

    def __init__(self, detail: str = "This action cannot be undone. Please confirm to continue."):
        super().__init__(
            detail=detail,
            error_code="CONFIRMATION_REQUIRED"
        )

async def marketplace_exception_handler(request: Request, exc: MarketplaceException):
    """Render application errors as {"error": {"code", "message"}}"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.error_code,
                "message": exc.detail
            }
        },
        headers=exc.headers
    )

async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render malformed request bodies and params in the same error shape"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    logger.info(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": message
            }
        }
    )

def register_exception_handlers(app: FastAPI):
    """Attach the application error handlers"""
    app.add_exception_handler(MarketplaceException, marketplace_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
