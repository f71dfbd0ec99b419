from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from portal.utils.clock import iso


# Fixed-width ISO strings so stored timestamps sort lexically.
Timestamp = Annotated[datetime, PlainSerializer(iso, return_type=str, when_used="json")]


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Principal(BaseModel):
    id: str
    display_name: str = ""
    email: Optional[str] = None
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class FileUpload(BaseModel):
    """An incoming file; the bytes go to storage, records keep only name/size/path."""

    name: str
    content_type: str
    data: bytes = b""
    size: Optional[int] = None

    @property
    def byte_size(self) -> int:
        return self.size if self.size is not None else len(self.data)


class Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: Timestamp
    updated_at: Optional[Timestamp] = None
    version: int = Field(1, ge=1)

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
