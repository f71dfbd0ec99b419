"""File storage for paper manuscripts and payment slips.

Callers hand over bytes and get back a storage path; records only ever
carry that path with the file's name and size.
"""

import re
from abc import ABC, abstractmethod
from hashlib import sha256
from pathlib import Path
from uuid import uuid4

from portal.errors import GatewayError
from portal.utils.config import PAPER_BUCKET, SLIP_BUCKET, UPLOADS_DIR
from portal.utils.logger import get_logger


logger = get_logger("storage")

PAPERS_FOLDER = "papers"
PAYMENTS_FOLDER = "payments"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_name(filename: str, data: bytes) -> str:
    """``<content hash>_<random>_<sanitized name>``; unique per upload even for identical files."""
    base = _UNSAFE_CHARS.sub("_", Path(filename).name).strip("._") or "upload.bin"
    return f"{sha256(data).hexdigest()[:12]}_{uuid4().hex[:8]}_{base}"


class Storage(ABC):
    @abstractmethod
    def upload(self, folder: str, filename: str, data: bytes, content_type: str) -> str:
        ...

    @abstractmethod
    def remove(self, path: str) -> None:
        ...


class LocalStorage(Storage):
    """Writes uploads under ``<root>/<folder>/``; paths are returned relative to ``root``."""

    def __init__(self, root: Path = UPLOADS_DIR) -> None:
        self.root = Path(root)

    def upload(self, folder, filename, data, content_type):
        name = safe_name(filename, data)
        dest = self.root / folder / name
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            dest.write_bytes(data)
        except OSError as e:
            logger.error("Writing %s failed: %s", dest, e)
            raise GatewayError(f"storing {filename} failed") from e
        logger.info("Stored %s (%d bytes) -> %s/%s", filename, len(data), folder, name)
        return f"{folder}/{name}"

    def remove(self, path):
        target = self.root / path
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Removing %s failed: %s", target, e)
            raise GatewayError(f"removing {path} failed") from e


class SupabaseStorage(Storage):
    """Uploads into Supabase storage buckets; ``papers`` and ``payments`` map to configured buckets."""

    def __init__(self, client, buckets: dict[str, str] | None = None) -> None:
        self.client = client
        self.buckets = buckets or {PAPERS_FOLDER: PAPER_BUCKET, PAYMENTS_FOLDER: SLIP_BUCKET}

    def upload(self, folder, filename, data, content_type):
        bucket = self.buckets.get(folder, folder)
        name = safe_name(filename, data)
        try:
            self.client.storage.from_(bucket).upload(name, data, {"content-type": content_type})
        except Exception as e:
            logger.error("Supabase upload of %s to %s failed: %s", filename, bucket, e)
            raise GatewayError(f"storing {filename} failed") from e
        logger.info("Uploaded %s (%d bytes) -> %s/%s", filename, len(data), bucket, name)
        return f"{bucket}/{name}"

    def remove(self, path):
        bucket, _, name = path.partition("/")
        try:
            self.client.storage.from_(bucket).remove([name])
        except Exception as e:
            logger.error("Supabase remove of %s failed: %s", path, e)
            raise GatewayError(f"removing {path} failed") from e


def get_storage() -> Storage:
    from portal.services.supabase_client import supabase

    sb = supabase()
    if sb is None:
        return LocalStorage()
    return SupabaseStorage(sb)
