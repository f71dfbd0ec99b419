from abc import ABC, abstractmethod
from typing import Optional

from portal.errors import AuthenticationError
from portal.models.common import Principal, Role
from portal.utils.config import BACKEND_API_KEY
from portal.utils.logger import get_logger


logger = get_logger("auth")

SERVICE_ADMIN = Principal(id="service-admin", display_name="admin", role=Role.ADMIN)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization.removeprefix("Bearer ").strip() or None


class Authenticator(ABC):
    @abstractmethod
    def resolve(self, token: str) -> Principal:
        """Return the principal for *token* or raise :class:`AuthenticationError`."""


class StaticTokenAuth(Authenticator):
    def __init__(self, tokens: Optional[dict[str, Principal]] = None) -> None:
        self.tokens = dict(tokens or {})

    def resolve(self, token):
        principal = self.tokens.get(token)
        if principal is None:
            raise AuthenticationError("invalid token")
        return principal


class SupabaseAuth(Authenticator):
    """Validates access tokens against Supabase auth; the role comes from ``app_metadata.role``."""

    def __init__(self, client, fallback: Optional[Authenticator] = None) -> None:
        self.client = client
        self.fallback = fallback

    def resolve(self, token):
        if self.fallback is not None:
            try:
                return self.fallback.resolve(token)
            except AuthenticationError:
                pass
        try:
            res = self.client.auth.get_user(token)
        except Exception as e:
            logger.warning("Supabase token check failed: %s", e)
            raise AuthenticationError("invalid token") from e
        user = getattr(res, "user", None)
        if user is None:
            raise AuthenticationError("invalid token")
        app_meta = getattr(user, "app_metadata", None) or {}
        user_meta = getattr(user, "user_metadata", None) or {}
        role = str(app_meta.get("role") or "USER").upper()
        return Principal(
            id=str(user.id),
            display_name=user_meta.get("full_name") or user_meta.get("name") or (user.email or ""),
            email=user.email,
            role=Role.ADMIN if role == Role.ADMIN.value else Role.USER,
        )


def get_authenticator() -> Authenticator:
    from portal.services.supabase_client import supabase

    static = StaticTokenAuth({BACKEND_API_KEY: SERVICE_ADMIN} if BACKEND_API_KEY else {})
    sb = supabase()
    if sb is None:
        if not BACKEND_API_KEY:
            logger.warning("No Supabase auth and no BACKEND_API_KEY; every authenticated call will be refused.")
        return static
    return SupabaseAuth(sb, fallback=static)
