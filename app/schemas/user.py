"""Identity and profile schemas"""

from typing import Optional, Dict, Any
from pydantic import Field
from datetime import datetime

from .base import BaseSchema

# Shown when a seller's profile row cannot be read
FALLBACK_SELLER_NAME = "Seller"
FALLBACK_SELLER_PHONE = "Not available"

class Identity(BaseSchema):
    """Authenticated account plus its profile metadata"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or "User"

    @classmethod
    def from_auth_user(cls, user: Any) -> "Identity":
        """Build from a backend auth user object or dict"""
        if isinstance(user, dict):
            data = user
        else:
            data = {
                "id": getattr(user, "id", None),
                "email": getattr(user, "email", None),
                "created_at": getattr(user, "created_at", None),
                "user_metadata": getattr(user, "user_metadata", None),
            }
        metadata: Dict[str, Any] = data.get("user_metadata") or {}
        return cls(
            id=str(data["id"]),
            email=data.get("email"),
            name=metadata.get("name"),
            phone=metadata.get("phone"),
            created_at=data.get("created_at"),
        )

class Profile(BaseSchema):
    """Public profile row"""
    id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None

class SellerContact(BaseSchema):
    """Seller details and contact actions shown on a listing"""
    name: str
    phone: str
    is_fallback: bool = False
    call_url: Optional[str] = None
    whatsapp_url: Optional[str] = None

    @property
    def can_contact(self) -> bool:
        return self.call_url is not None

    @classmethod
    def fallback(cls) -> "SellerContact":
        return cls(name=FALLBACK_SELLER_NAME, phone=FALLBACK_SELLER_PHONE, is_fallback=True)

class SignUpRequest(BaseSchema):
    """Account registration form"""
    name: str
    phone: str
    email: str
    password: str

class SignInRequest(BaseSchema):
    """Login form"""
    email: str
    password: str

class PasswordResetRequest(BaseSchema):
    """Forgot password form"""
    email: str

class NewPasswordRequest(BaseSchema):
    """Set new password form"""
    password: str
    confirm_password: str = Field(..., alias="confirmPassword")

class MessageResponse(BaseSchema):
    """Plain status message"""
    message: str

class SessionResponse(BaseSchema):
    """Current session state"""
    authenticated: bool
    loading: bool = False
    user: Optional[Identity] = None
    greeting: Optional[str] = None
