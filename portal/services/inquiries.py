"""Contact-form inquiries.

``is_read`` only ever goes from false to true: on the first admin view, an
explicit mark-read, or a reply. A reply writes the response text together
with who answered and when.
"""

import re
from typing import Optional

from portal.errors import ValidationError
from portal.models.inquiry import Inquiry, Priority
from portal.services.base import Lifecycle, new_id
from portal.services.gateway import MESSAGES
from portal.services.session import Session
from portal.utils.clock import iso
from portal.utils.logger import get_logger
from portal.utils.validation import coerce_enum, is_email, require_text


logger = get_logger("inquiries")


def normalize_category(category: Optional[str]) -> str:
    tag = re.sub(r"[\s-]+", "_", (category or "").strip().lower())
    return tag or "general"


class InquiryLifecycle(Lifecycle):
    def submit_inquiry(
        self,
        session: Session,
        name: Optional[str],
        email: Optional[str],
        subject: Optional[str],
        body: Optional[str],
        priority=Priority.MEDIUM,
        category: Optional[str] = "general",
    ) -> Inquiry:
        name = require_text(name, "Please enter your name")
        email = require_text(email, "Please enter your email")
        if not is_email(email):
            raise ValidationError("Please enter a valid email address")
        subject = require_text(subject, "Please enter a subject")
        body = require_text(body, "Please enter a message")
        priority = coerce_enum(Priority, priority or Priority.MEDIUM, "priority")

        now = self.clock()
        inquiry = Inquiry(
            id=new_id(),
            name=name,
            email=email,
            subject=subject,
            body=body,
            is_read=False,
            priority=priority,
            category=normalize_category(category),
            created_at=now,
            updated_at=now,
        )
        inquiry = Inquiry.model_validate(self.gateway.create(MESSAGES, inquiry.to_record()))
        logger.info("Inquiry %s received from %s (%s)", inquiry.id, inquiry.email, inquiry.priority.value)
        session.emit("inquiry.created", id=inquiry.id, priority=inquiry.priority.value)
        return inquiry

    def get(self, session: Session, inquiry_id: str) -> Inquiry:
        session.require_admin("read inquiries")
        return Inquiry.model_validate(self.gateway.get(MESSAGES, inquiry_id))

    def view(self, session: Session, inquiry_id: str) -> Inquiry:
        """Open an inquiry as an admin; the first view marks it read."""
        return self.mark_read(session, inquiry_id)

    def mark_read(self, session: Session, inquiry_id: str) -> Inquiry:
        inquiry = self.get(session, inquiry_id)
        if inquiry.is_read:
            return inquiry
        patch = {"is_read": True, "updated_at": iso(self.clock())}
        inquiry = Inquiry.model_validate(self.gateway.update(MESSAGES, inquiry_id, patch))
        logger.info("Inquiry %s marked read by %s", inquiry_id, session.actor_id)
        session.emit("inquiry.read", id=inquiry_id)
        return inquiry

    def respond(
        self,
        session: Session,
        inquiry_id: str,
        response_text: Optional[str],
        expected_version: Optional[int] = None,
    ) -> Inquiry:
        admin = session.require_admin("reply to inquiries")
        response = require_text(response_text, "Please enter a response")
        now = iso(self.clock())
        patch = {
            "admin_response": response,
            "responded_at": now,
            "responded_by": admin.id,
            "is_read": True,
            "updated_at": now,
        }
        inquiry = Inquiry.model_validate(self.gateway.update(MESSAGES, inquiry_id, patch, expected_version))
        logger.info("Inquiry %s answered by %s", inquiry_id, admin.id)
        session.emit("inquiry.responded", id=inquiry_id)
        return inquiry

    def remove(self, session: Session, inquiry_id: str, confirm: bool = False) -> None:
        admin = session.require_admin("delete inquiries")
        if not confirm:
            raise ValidationError("Deleting an inquiry cannot be undone; confirm the deletion to proceed")
        self.gateway.delete(MESSAGES, inquiry_id)
        logger.info("Inquiry %s deleted by %s", inquiry_id, admin.id)
        session.emit("inquiry.removed", id=inquiry_id)

    def list_all(self, session: Session) -> list[Inquiry]:
        session.require_admin("list inquiries")
        rows = self.gateway.list(MESSAGES, sort={"created_at": -1})
        return [Inquiry.model_validate(r) for r in rows]


def unread_count(inquiries: list[Inquiry]) -> int:
    return sum(1 for m in inquiries if not m.is_read)


def unread_urgent_count(inquiries: list[Inquiry]) -> int:
    return sum(1 for m in inquiries if not m.is_read and m.priority == Priority.URGENT)
