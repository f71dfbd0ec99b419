from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from portal.models.common import Record, Timestamp


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Inquiry(Record):
    name: str
    email: str
    subject: str
    body: str
    is_read: bool = False
    priority: Priority = Priority.MEDIUM
    category: str = "general"
    admin_response: Optional[str] = None
    responded_at: Optional[Timestamp] = None
    responded_by: Optional[str] = None

    @model_validator(mode="after")
    def _response_fields_together(self) -> "Inquiry":
        present = [self.admin_response is not None, self.responded_at is not None, self.responded_by is not None]
        if any(present) and not all(present):
            raise ValueError("admin_response, responded_at and responded_by must be set together")
        return self
