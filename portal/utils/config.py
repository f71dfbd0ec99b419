import os
from dotenv import load_dotenv
from pathlib import Path

load_dotenv(override=False)


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v not in (None, "", "null", "None") else default


REPO_ROOT = Path(__file__).resolve().parents[2]


STORAGE_ROOT = Path(_env("STORAGE_ROOT", str(REPO_ROOT)))
UPLOADS_DIR = STORAGE_ROOT / _env("UPLOADS_DIR", "uploads")


SUPABASE_URL = _env("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = _env("SUPABASE_SERVICE_ROLE_KEY")
PAPER_BUCKET = _env("PAPER_BUCKET", "papers")
SLIP_BUCKET = _env("SLIP_BUCKET", "payments")

# Bearer token that resolves to the service admin when Supabase auth is not used.
BACKEND_API_KEY = _env("BACKEND_API_KEY")

# Seconds; applied to every gateway, storage and auth call.
GATEWAY_TIMEOUT = float(_env("GATEWAY_TIMEOUT", "10") or "10")

CONFERENCE_CODE = _env("CONFERENCE_CODE", "ICHR2026")


HOST = _env("HOST", "0.0.0.0")
PORT = int(_env("PORT", "8080") or "8080")
FLASK_ENV = _env("FLASK_ENV", "production")


def ensure_dirs():
    for p in (UPLOADS_DIR, UPLOADS_DIR / "papers", UPLOADS_DIR / "payments"):
        p.mkdir(parents=True, exist_ok=True)
