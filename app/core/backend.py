"""
Supabase gateway
Single access point for authentication, table storage and object storage
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union
import inspect
import logging

from supabase import (
    AsyncClient,
    AuthApiError,
    AuthError,
    PostgrestAPIError,
    StorageException,
    acreate_client,
)

from .config import settings
from .exceptions import (
    BackendException,
    InvalidCredentialsException,
    MarketplaceException,
    NotFoundException,
    ServiceUnavailableException,
)
from .monitoring import record_backend_call
from app.schemas.user import Identity

logger = logging.getLogger(__name__)

# PostgREST code for "single row expected, none returned"
NO_ROWS_CODE = "PGRST116"

Row = Dict[str, Any]
SessionCallback = Callable[[str, Optional[Identity]], None]

@dataclass(frozen=True)
class Expand:
    """Embed a related row through a foreign key column"""
    alias: str
    foreign_key: str
    table: str
    columns: str = "*"

    def to_select(self) -> str:
        return f"{self.alias}:{self.foreign_key} ({self.columns})"


def build_select(columns: str, expand: Sequence[Expand] = ()) -> str:
    """Combine plain columns and embedded relations into one select string"""
    parts = [columns] if columns else []
    parts.extend(item.to_select() for item in expand)
    return ", ".join(parts) or "*"


def _error_message(error: Exception) -> str:
    message = getattr(error, "message", None)
    return message or str(error)


class BackendClient:
    """Thin async wrapper around the Supabase client"""

    def __init__(self, client: AsyncClient):
        self.client = client

    @classmethod
    async def connect(cls) -> "BackendClient":
        """Create the Supabase client from settings"""
        if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
            raise ServiceUnavailableException(
                "Supabase credentials not configured. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        logger.info("Supabase client created")
        return cls(client)

    @contextmanager
    def _translate_errors(self, area: str, operation: str):
        """Turn Supabase errors into application exceptions"""
        try:
            yield
        except MarketplaceException:
            record_backend_call(area, operation, success=False)
            raise
        except AuthApiError as e:
            record_backend_call(area, operation, success=False)
            if operation == "sign_in":
                raise InvalidCredentialsException(_error_message(e))
            raise BackendException(_error_message(e))
        except AuthError as e:
            record_backend_call(area, operation, success=False)
            raise BackendException(_error_message(e))
        except PostgrestAPIError as e:
            record_backend_call(area, operation, success=False)
            if e.code == NO_ROWS_CODE:
                raise NotFoundException("Record not found")
            raise BackendException(_error_message(e))
        except StorageException as e:
            record_backend_call(area, operation, success=False)
            raise BackendException(_error_message(e))
        else:
            record_backend_call(area, operation)

    # ---------------------------------------------------------------
    # Authentication
    # ---------------------------------------------------------------

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Dict[str, Any]
    ) -> Tuple[Optional[Identity], bool]:
        """
        Register an account

        Returns:
            Tuple of (identity, whether the backend opened a session)
        """
        with self._translate_errors("auth", "sign_up"):
            response = await self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata},
            })
        identity = Identity.from_auth_user(response.user) if response.user else None
        return identity, response.session is not None

    async def sign_in(self, email: str, password: str) -> Identity:
        with self._translate_errors("auth", "sign_in"):
            response = await self.client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        if not response.user:
            raise InvalidCredentialsException()
        return Identity.from_auth_user(response.user)

    async def sign_out(self) -> None:
        with self._translate_errors("auth", "sign_out"):
            await self.client.auth.sign_out()

    async def get_current_identity(self) -> Optional[Identity]:
        """Identity of the stored session, if any"""
        with self._translate_errors("auth", "get_session"):
            session = await self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return Identity.from_auth_user(session.user)

    def subscribe_to_session_changes(self, callback: SessionCallback):
        """
        Forward backend auth events to callback(event, identity)

        Returns:
            Subscription handle with an unsubscribe() method
        """
        def _on_change(event, session):
            user = getattr(session, "user", None) if session else None
            callback(str(event), Identity.from_auth_user(user) if user else None)

        return self.client.auth.on_auth_state_change(_on_change)

    async def send_password_reset(self, email: str, redirect_url: str) -> None:
        with self._translate_errors("auth", "reset_password"):
            await self.client.auth.reset_password_for_email(
                email, {"redirect_to": redirect_url}
            )

    async def update_current_password(self, new_password: str) -> None:
        with self._translate_errors("auth", "update_password"):
            await self.client.auth.update_user({"password": new_password})

    # ---------------------------------------------------------------
    # Tables
    # ---------------------------------------------------------------

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        expand: Sequence[Expand] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        single: bool = False,
        maybe_single: bool = False,
    ) -> Union[List[Row], Row, None]:
        """
        Read rows filtered by column equality

        Returns:
            List of rows, or a single row (None allowed with maybe_single)
        """
        with self._translate_errors("table", f"select:{table}"):
            query = self.client.table(table).select(build_select(columns, expand))
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            if single:
                query = query.single()
            elif maybe_single:
                query = query.maybe_single()
            response = await query.execute()

        if response is None:
            return None
        if single or maybe_single:
            return response.data
        return response.data or []

    async def insert(self, table: str, rows: Union[Row, List[Row]]) -> List[Row]:
        with self._translate_errors("table", f"insert:{table}"):
            response = await self.client.table(table).insert(rows).execute()
        return response.data or []

    async def update(self, table: str, patch: Row, filters: Dict[str, Any]) -> List[Row]:
        with self._translate_errors("table", f"update:{table}"):
            query = self.client.table(table).update(patch)
            for column, value in filters.items():
                query = query.eq(column, value)
            response = await query.execute()
        return response.data or []

    async def delete(self, table: str, filters: Dict[str, Any]) -> List[Row]:
        with self._translate_errors("table", f"delete:{table}"):
            query = self.client.table(table).delete()
            for column, value in filters.items():
                query = query.eq(column, value)
            response = await query.execute()
        return response.data or []

    # ---------------------------------------------------------------
    # Object storage
    # ---------------------------------------------------------------

    async def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: Optional[str] = None
    ) -> None:
        file_options = {"content-type": content_type} if content_type else None
        with self._translate_errors("storage", "upload"):
            await self.client.storage.from_(bucket).upload(
                path=key,
                file=content,
                file_options=file_options
            )

    async def get_public_url(self, bucket: str, key: str) -> str:
        with self._translate_errors("storage", "public_url"):
            url = self.client.storage.from_(bucket).get_public_url(key)
            if inspect.isawaitable(url):
                url = await url
        return url

    async def remove(self, bucket: str, keys: List[str]) -> None:
        with self._translate_errors("storage", "remove"):
            await self.client.storage.from_(bucket).remove(keys)
