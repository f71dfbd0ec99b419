from typing import Optional

from supabase import Client, ClientOptions, create_client

from portal.utils.config import GATEWAY_TIMEOUT, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL
from portal.utils.logger import get_logger


logger = get_logger("supabase-client")


_client: Optional[Client] = None


def is_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)


def supabase() -> Optional[Client]:
    global _client
    if _client:
        return _client
    if not is_configured():
        logger.info("Supabase not configured; running on local collections.")
        return None
    options = ClientOptions(
        postgrest_client_timeout=GATEWAY_TIMEOUT,
        storage_client_timeout=int(GATEWAY_TIMEOUT),
    )
    _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, options=options)
    return _client
