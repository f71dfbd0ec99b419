from flask import Blueprint, jsonify
import requests
from portal.routes.common import services
from portal.services.supabase_client import is_configured
from portal.utils.config import GATEWAY_TIMEOUT, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL
from portal.utils.logger import get_logger


bp = Blueprint("health", __name__, url_prefix="/api/system")
logger = get_logger("health")


@bp.get("/health")
def health():
    status = {"flask": "ok", "supabase": "not_configured", "gateway": "down"}
    if is_configured():
        try:
            r = requests.get(
                f"{SUPABASE_URL}/rest/v1/",
                headers={"apikey": SUPABASE_SERVICE_ROLE_KEY},
                timeout=GATEWAY_TIMEOUT,
            )
            status["supabase"] = "ok" if r.status_code < 500 else "down"
        except requests.RequestException as e:
            logger.warning("Supabase unreachable: %s", e)
            status["supabase"] = "down"
    status["gateway"] = "ok" if services().gateway.ping() else "down"
    return jsonify(status), 200
