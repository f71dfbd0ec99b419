from enum import Enum
from typing import Optional

from pydantic import Field

from portal.models.common import Record, Timestamp


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    REVISION_REQUIRED = "revision_required"


# Decisions that must carry a reviewer comment.
COMMENT_REQUIRED = {SubmissionStatus.REJECTED, SubmissionStatus.REVISION_REQUIRED}

PAPER_CONTENT_TYPES = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}
MAX_PAPER_BYTES = 16 * 1024 * 1024

TITLE_MIN_LENGTH = 5
ABSTRACT_MIN_LENGTH = 100
ABSTRACT_MAX_LENGTH = 2000


class Submission(Record):
    title: str
    abstract: str
    keywords: list[str] = Field(default_factory=list)
    user_id: str
    file_name: str
    file_size: int = Field(..., ge=0)
    file_path: str
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    reviewer_comments: Optional[str] = None
    submitted_at: Timestamp
    reviewed_at: Optional[Timestamp] = None
    reviewed_by: Optional[str] = None
