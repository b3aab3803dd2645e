"""
Current session state
Holds the signed-in identity shared by every screen
"""

from typing import Callable, List, Optional
import logging

from .exceptions import LoginRequiredException
from app.schemas.base import same_id
from app.schemas.user import Identity

logger = logging.getLogger(__name__)

SessionListener = Callable[[str, Optional[Identity]], None]

class SessionContext:
    """Signed-in identity plus a loading flag, passed to every view-model"""

    def __init__(self, identity: Optional[Identity] = None, loading: bool = False):
        self.identity = identity
        self.loading = loading
        self._listeners: List[SessionListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.id if self.identity else None

    def require_identity(self, action: str = "continue") -> Identity:
        """Return the identity or raise a login-required error"""
        if self.identity is None:
            raise LoginRequiredException(action)
        return self.identity

    def owns(self, owner_id) -> bool:
        """Whether the signed-in identity owns a record"""
        return self.identity is not None and same_id(self.identity.id, owner_id)

    def set_identity(self, identity: Optional[Identity], event: str = "SET") -> None:
        self.identity = identity
        self.loading = False
        for listener in list(self._listeners):
            try:
                listener(event, identity)
            except Exception as e:
                logger.error(f"Session listener failed on {event}: {e}")

    def clear(self, event: str = "SIGNED_OUT") -> None:
        self.set_identity(None, event)

    def handle_auth_event(self, event: str, identity: Optional[Identity]) -> None:
        """Apply a backend auth-state notification"""
        logger.info(f"Auth state changed: {event}")
        self.set_identity(identity, event)

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Observe identity changes; returns a function that removes the listener"""
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove
