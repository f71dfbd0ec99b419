"""Paper submission and review.

A paper starts as ``submitted`` when its owner uploads it. From there an
admin may move it to any of the five review states, in any order; every
such move stamps ``reviewed_at``/``reviewed_by`` and replaces the reviewer
comment. Papers are never deleted.
"""

from typing import Optional, Union

from portal.errors import ValidationError
from portal.models.common import FileUpload
from portal.models.labels import label_for
from portal.models.submission import (
    ABSTRACT_MAX_LENGTH,
    ABSTRACT_MIN_LENGTH,
    COMMENT_REQUIRED,
    MAX_PAPER_BYTES,
    PAPER_CONTENT_TYPES,
    TITLE_MIN_LENGTH,
    Submission,
    SubmissionStatus,
)
from portal.services.base import Lifecycle, new_id
from portal.services.gateway import PAPERS
from portal.services.session import Session
from portal.services.storage import PAPERS_FOLDER
from portal.utils.clock import iso
from portal.utils.logger import get_logger
from portal.utils.validation import coerce_enum, mib


logger = get_logger("submissions")


def parse_keywords(keywords: Union[str, list[str], None]) -> list[str]:
    if keywords is None:
        return []
    if isinstance(keywords, str):
        keywords = keywords.split(",")
    return [k.strip() for k in keywords if k and k.strip()]


def validate_paper(title: Optional[str], abstract: Optional[str], keywords, file: Optional[FileUpload]):
    """Check the submission form in order and raise on the first problem."""
    title = (title or "").strip()
    abstract = (abstract or "").strip()
    if not title:
        raise ValidationError("Please enter a paper title")
    if len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Title must be at least {TITLE_MIN_LENGTH} characters long")
    if not abstract:
        raise ValidationError("Please enter an abstract")
    if len(abstract) < ABSTRACT_MIN_LENGTH:
        raise ValidationError(f"Abstract must be at least {ABSTRACT_MIN_LENGTH} characters long")
    if len(abstract) > ABSTRACT_MAX_LENGTH:
        raise ValidationError(f"Abstract must be at most {ABSTRACT_MAX_LENGTH} characters long")
    keyword_list = parse_keywords(keywords)
    if not keyword_list:
        raise ValidationError("Please enter keywords")
    if file is None:
        raise ValidationError("Please upload a paper file")
    if file.content_type not in PAPER_CONTENT_TYPES:
        raise ValidationError("Please upload a PDF, DOC, or DOCX file")
    if file.byte_size > MAX_PAPER_BYTES:
        raise ValidationError(f"File size must be less than {mib(MAX_PAPER_BYTES)}")
    return title, abstract, keyword_list


class SubmissionLifecycle(Lifecycle):
    def submit(
        self,
        session: Session,
        title: Optional[str],
        abstract: Optional[str],
        keywords,
        file: Optional[FileUpload],
    ) -> Submission:
        owner = session.require_user()
        title, abstract, keyword_list = validate_paper(title, abstract, keywords, file)

        now = self.clock()

        def build(path: str) -> dict:
            return Submission(
                id=new_id(),
                title=title,
                abstract=abstract,
                keywords=keyword_list,
                user_id=owner.id,
                file_name=file.name,
                file_size=file.byte_size,
                file_path=path,
                status=SubmissionStatus.SUBMITTED,
                submitted_at=now,
                created_at=now,
                updated_at=now,
            ).to_record()

        paper = Submission.model_validate(self._store_and_create(PAPERS, PAPERS_FOLDER, file, build))
        logger.info("Paper %s submitted by %s (%s, %d bytes)", paper.id, owner.id, paper.file_name, paper.file_size)
        session.emit("submission.created", id=paper.id, status=paper.status.value)
        return paper

    def review(
        self,
        session: Session,
        submission_id: str,
        new_status,
        comment: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Submission:
        admin = session.require_admin("review papers")
        status = coerce_enum(SubmissionStatus, new_status, "status")
        comment = (comment or "").strip() or None
        if status in COMMENT_REQUIRED and not comment:
            raise ValidationError(f"A reviewer comment is required when marking a paper {label_for(status)}")

        now = iso(self.clock())
        patch = {
            "status": status.value,
            "reviewer_comments": comment,
            "reviewed_at": now,
            "reviewed_by": admin.id,
            "updated_at": now,
        }
        paper = Submission.model_validate(self.gateway.update(PAPERS, submission_id, patch, expected_version))
        logger.info("Paper %s set to %s by %s", submission_id, status.value, admin.id)
        session.emit("submission.reviewed", id=submission_id, status=status.value)
        return paper

    def get(self, session: Session, submission_id: str) -> Submission:
        paper = Submission.model_validate(self.gateway.get(PAPERS, submission_id))
        session.require_owner_or_admin(paper.user_id)
        return paper

    def list_for_owner(self, session: Session, owner_id: Optional[str] = None) -> list[Submission]:
        owner_id = owner_id or session.require_user().id
        session.require_owner_or_admin(owner_id)
        rows = self.gateway.list(PAPERS, filters={"user_id": owner_id}, sort={"submitted_at": -1})
        return [Submission.model_validate(r) for r in rows]

    def list_all(self, session: Session) -> list[Submission]:
        session.require_admin("list all papers")
        rows = self.gateway.list(PAPERS, sort={"submitted_at": -1})
        return [Submission.model_validate(r) for r in rows]
