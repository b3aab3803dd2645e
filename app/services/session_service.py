"""
Session manager
Sign-up, sign-in, sign-out and password reset against the backend auth service
"""

from typing import Optional
import logging

from app.core.backend import BackendClient
from app.core.config import settings
from app.core.exceptions import (
    BackendException,
    EmailAlreadyRegisteredException,
    PhoneAlreadyRegisteredException,
)
from app.core.session import SessionContext
from app.schemas.user import Identity
from app.utils.validators import (
    validate_email_address,
    validate_name,
    validate_new_password,
    validate_password,
    validate_phone,
)

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"

SIGN_UP_SUCCESS = "Account created successfully! Please login."
RESET_LINK_SENT = "Password reset link sent! Check your email inbox."
PASSWORD_UPDATED = "Password updated successfully!"

# Backend wording for a duplicate email
DUPLICATE_EMAIL_MARKERS = ("already registered", "already been registered")

class SessionManager:
    """Owns the process-wide session and the auth subscription"""

    def __init__(self, backend: BackendClient, context: Optional[SessionContext] = None):
        self.backend = backend
        self.context = context or SessionContext(loading=True)
        self._subscription = None

    async def start(self) -> SessionContext:
        """Load any stored session and follow auth-state changes"""
        self.context.loading = True
        try:
            identity = await self.backend.get_current_identity()
        except BackendException as e:
            logger.warning(f"Could not restore session: {e.detail}")
            identity = None
        self.context.set_identity(identity, "INITIAL_SESSION")
        self._subscription = self.backend.subscribe_to_session_changes(
            self.context.handle_auth_event
        )
        logger.info(
            f"Session initialised ({'signed in' if identity else 'anonymous'})"
        )
        return self.context

    def stop(self) -> None:
        """Release the auth-state subscription"""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info("Auth subscription released")

    async def phone_exists(self, phone: str) -> bool:
        row = await self.backend.select(
            PROFILES_TABLE,
            columns="phone",
            filters={"phone": phone},
            maybe_single=True,
        )
        return row is not None

    async def sign_up(self, name: str, phone: str, email: str, password: str) -> str:
        """
        Register a new account

        The caller is not signed in afterwards and has to log in explicitly.

        Returns:
            Success message

        Raises:
            ValidationException: Bad name, phone, email or password
            PhoneAlreadyRegisteredException: Phone used by another profile
            EmailAlreadyRegisteredException: Backend reports a duplicate email
        """
        name = validate_name(name)
        phone = validate_phone(phone)
        email = validate_email_address(email)
        validate_password(password)

        # Best-effort uniqueness check; two concurrent sign-ups can still race
        if await self.phone_exists(phone):
            raise PhoneAlreadyRegisteredException()

        try:
            identity, has_session = await self.backend.sign_up(
                email, password, {"name": name, "phone": phone}
            )
        except BackendException as e:
            if any(marker in e.detail for marker in DUPLICATE_EMAIL_MARKERS):
                raise EmailAlreadyRegisteredException()
            raise

        if has_session:
            # Accounts without email confirmation come back signed in
            await self.backend.sign_out()
            self.context.clear("SIGNED_OUT")

        logger.info(f"Account created for {email}")
        return SIGN_UP_SUCCESS

    async def sign_in(self, email: str, password: str) -> Identity:
        email = (email or "").strip()
        identity = await self.backend.sign_in(email, password)
        self.context.set_identity(identity, "SIGNED_IN")
        logger.info(f"Signed in {identity.id}")
        return identity

    async def sign_out(self) -> None:
        await self.backend.sign_out()
        self.context.clear("SIGNED_OUT")

    async def request_password_reset(self, email: str) -> str:
        """Send a reset link; the reply does not depend on whether the email exists"""
        email = validate_email_address(email)
        await self.backend.send_password_reset(email, settings.password_reset_redirect)
        return RESET_LINK_SENT

    async def commit_new_password(self, password: str, confirm_password: str) -> str:
        """Set a new password on the session opened by the reset link"""
        validate_new_password(password, confirm_password)
        await self.backend.update_current_password(password)
        return PASSWORD_UPDATED
