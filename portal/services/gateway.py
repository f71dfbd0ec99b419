"""Persistence gateway: list/get/create/update/delete over named collections.

Records are plain dicts with an ``id`` and an integer ``version``. Every
``update`` bumps the version; passing ``expected_version`` turns the update
into a compare-and-swap that raises :class:`ConflictError` when another
writer got there first.
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from portal.errors import ConflictError, GatewayError, NotFoundError
from portal.utils.logger import get_logger


logger = get_logger("gateway")

PAPERS = "papers"
PAYMENTS = "payments"
MESSAGES = "messages"
USER_PROFILES = "user_profiles"

COLLECTIONS = (PAPERS, PAYMENTS, MESSAGES, USER_PROFILES)

# {"submitted_at": -1} sorts descending, {"name": 1} ascending.
Sort = dict[str, int]


class Gateway(ABC):
    @abstractmethod
    def list(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        sort: Optional[Sort] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def get(self, collection: str, record_id: str) -> dict[str, Any]:
        ...

    @abstractmethod
    def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    def update(
        self,
        collection: str,
        record_id: str,
        patch: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        ...

    def ping(self) -> bool:
        return True


def _check_version(collection: str, record_id: str, current: int, expected: Optional[int]) -> None:
    if expected is not None and current != expected:
        raise ConflictError(
            f"{collection} record {record_id} changed (version {current}, expected {expected})"
        )


class InMemoryGateway(Gateway):
    """Process-local collections; used when Supabase is not configured and in tests."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(name, {})

    def list(self, collection, filters=None, sort=None, limit=None):
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._collection(collection).values()]
        if filters:
            rows = [r for r in rows if all(r.get(k) == v for k, v in filters.items())]
        # Apply keys last-to-first so the first sort key wins.
        for field, direction in reversed(list((sort or {}).items())):
            rows.sort(key=lambda r: (r.get(field) is not None, r.get(field)), reverse=direction < 0)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def get(self, collection, record_id):
        with self._lock:
            row = self._collection(collection).get(record_id)
            if row is None:
                raise NotFoundError(collection, record_id)
            return copy.deepcopy(row)

    def create(self, collection, record):
        if not record.get("id"):
            raise GatewayError(f"{collection}: record id is required")
        with self._lock:
            rows = self._collection(collection)
            if record["id"] in rows:
                raise ConflictError(f"{collection} record already exists: {record['id']}")
            stored = copy.deepcopy(record)
            stored.setdefault("version", 1)
            rows[stored["id"]] = stored
            return copy.deepcopy(stored)

    def update(self, collection, record_id, patch, expected_version=None):
        with self._lock:
            row = self._collection(collection).get(record_id)
            if row is None:
                raise NotFoundError(collection, record_id)
            current = int(row.get("version") or 1)
            _check_version(collection, record_id, current, expected_version)
            row.update(copy.deepcopy(patch))
            row["id"] = record_id
            row["version"] = current + 1
            return copy.deepcopy(row)

    def delete(self, collection, record_id):
        with self._lock:
            if self._collection(collection).pop(record_id, None) is None:
                raise NotFoundError(collection, record_id)


class SupabaseGateway(Gateway):
    """Collections backed by Supabase tables through the postgrest query builder."""

    def __init__(self, client) -> None:
        self.client = client

    def _execute(self, action: str, collection: str, query):
        try:
            return query.execute()
        except Exception as e:
            logger.error("Supabase %s on %s failed: %s", action, collection, e)
            raise GatewayError(f"{action} on {collection} failed") from e

    def list(self, collection, filters=None, sort=None, limit=None):
        q = self.client.table(collection).select("*")
        for k, v in (filters or {}).items():
            q = q.eq(k, v)
        for field, direction in (sort or {}).items():
            q = q.order(field, desc=direction < 0)
        if limit is not None:
            q = q.limit(limit)
        res = self._execute("list", collection, q)
        return res.data or []

    def get(self, collection, record_id):
        q = self.client.table(collection).select("*").eq("id", record_id).limit(1)
        res = self._execute("get", collection, q)
        if not res.data:
            raise NotFoundError(collection, record_id)
        return res.data[0]

    def create(self, collection, record):
        row = dict(record)
        row.setdefault("version", 1)
        res = self._execute("create", collection, self.client.table(collection).insert(row))
        return (res.data or [row])[0]

    def update(self, collection, record_id, patch, expected_version=None):
        current = int(self.get(collection, record_id).get("version") or 1)
        _check_version(collection, record_id, current, expected_version)
        q = self.client.table(collection).update({**patch, "version": current + 1}).eq("id", record_id)
        if expected_version is not None:
            q = q.eq("version", expected_version)
        res = self._execute("update", collection, q)
        if not res.data:
            if expected_version is not None:
                raise ConflictError(f"{collection} record {record_id} changed during update")
            raise NotFoundError(collection, record_id)
        return res.data[0]

    def delete(self, collection, record_id):
        res = self._execute("delete", collection, self.client.table(collection).delete().eq("id", record_id))
        if not res.data:
            raise NotFoundError(collection, record_id)

    def ping(self) -> bool:
        try:
            self.client.table(PAPERS).select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.warning("Supabase ping failed: %s", e)
            return False


def get_gateway() -> Gateway:
    from portal.services.supabase_client import supabase

    sb = supabase()
    if sb is None:
        return InMemoryGateway()
    return SupabaseGateway(sb)
