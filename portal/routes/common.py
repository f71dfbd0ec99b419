from datetime import datetime
from enum import Enum
from typing import Any, Optional

from flask import current_app, g, request
from pydantic import BaseModel

from portal.errors import ValidationError
from portal.models.common import FileUpload
from portal.services.auth import bearer_token
from portal.services.container import Services
from portal.services.session import Session
from portal.utils.clock import iso


def services() -> Services:
    return current_app.extensions["portal"]


def current_session() -> Session:
    """Session for this request; anonymous when no bearer token was sent."""
    if "session" not in g:
        svc = services()
        token = bearer_token(request.headers.get("Authorization"))
        principal = svc.auth.resolve(token) if token else None
        g.session = Session(principal, svc.events)
    return g.session


def to_json(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, datetime):
        return iso(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("request body must be a JSON object")
    return body


def optional_version(body: dict[str, Any]) -> Optional[int]:
    v = body.get("version")
    if v is None:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ValidationError("version must be an integer") from None


def confirmed() -> bool:
    return request.args.get("confirm", "").lower() in ("1", "true", "yes")


def upload_from_request(field: str) -> Optional[FileUpload]:
    f = request.files.get(field)
    if not f or not f.filename:
        return None
    data = f.read()
    return FileUpload(name=f.filename, content_type=f.mimetype or "application/octet-stream", data=data)
