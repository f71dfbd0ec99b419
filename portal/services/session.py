"""Per-request context handed to every lifecycle call.

A :class:`Session` carries the acting principal and an event channel.
Lifecycles publish an event after each successful write; subscribers (a UI
push channel, an audit sink) register on the channel instead of polling a
global.
"""

from typing import Any, Callable, Optional

from portal.errors import AuthenticationError, PermissionDeniedError
from portal.models.common import Principal
from portal.utils.logger import get_logger


logger = get_logger("session")

Handler = Callable[[str, dict[str, Any]], None]


class EventChannel:
    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Register *handler*; the returned callable unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, name: str, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers):
            try:
                handler(name, payload)
            except Exception:
                # The write already happened; a broken subscriber must not undo it.
                logger.exception("Event handler failed for %s", name)


class Session:
    def __init__(self, principal: Optional[Principal] = None, events: Optional[EventChannel] = None) -> None:
        self.principal = principal
        self.events = events or EventChannel()

    @classmethod
    def anonymous(cls, events: Optional[EventChannel] = None) -> "Session":
        return cls(None, events)

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @property
    def is_admin(self) -> bool:
        return self.principal is not None and self.principal.is_admin

    @property
    def actor_id(self) -> str:
        return self.principal.id if self.principal else "anonymous"

    def require_user(self) -> Principal:
        if self.principal is None:
            raise AuthenticationError("sign in required")
        return self.principal

    def require_admin(self, action: str) -> Principal:
        principal = self.require_user()
        if not principal.is_admin:
            raise PermissionDeniedError(f"admin role required to {action}")
        return principal

    def require_owner_or_admin(self, owner_id: str) -> Principal:
        principal = self.require_user()
        if not principal.is_admin and principal.id != owner_id:
            raise PermissionDeniedError("not allowed to access another user's records")
        return principal

    def emit(self, name: str, **payload: Any) -> None:
        self.events.publish(name, {"actor": self.actor_id, **payload})
