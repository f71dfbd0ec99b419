"""
Tests for inquiry read tracking, replies and deletion.
"""

import pytest

from portal.errors import NotFoundError, PermissionDeniedError, ValidationError
from portal.models.inquiry import Inquiry, Priority
from portal.services.inquiries import normalize_category, unread_count, unread_urgent_count
from portal.services.session import Session


def send(inquiries, **overrides):
    args = {
        "name": "Grace Reader",
        "email": "grace@example.org",
        "subject": "Visa letter",
        "body": "Could you send an invitation letter for my visa application?",
        "priority": "high",
        "category": "registration",
    }
    args.update(overrides)
    return inquiries.submit_inquiry(Session.anonymous(), **args)


def test_submit_inquiry_starts_unread(inquiries, clock):
    msg = send(inquiries)
    assert msg.is_read is False
    assert msg.priority == Priority.HIGH
    assert msg.category == "registration"
    assert msg.admin_response is None
    assert msg.created_at == clock.now


def test_submit_inquiry_defaults(inquiries):
    msg = send(inquiries, priority=None, category=None)
    assert msg.priority == Priority.MEDIUM
    assert msg.category == "general"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"email": "not-an-email"},
        {"subject": "  "},
        {"body": None},
        {"priority": "normal"},
    ],
)
def test_submit_inquiry_validation(inquiries, gateway, overrides):
    with pytest.raises(ValidationError):
        send(inquiries, **overrides)
    assert gateway.list("messages") == []


def test_mark_read_is_idempotent(inquiries, admin_session, gateway):
    msg = send(inquiries)
    first = inquiries.mark_read(admin_session, msg.id)
    second = inquiries.mark_read(admin_session, msg.id)
    assert first.is_read and second.is_read
    # second call does not write again
    assert gateway.get("messages", msg.id)["version"] == 2


def test_view_marks_read_on_first_open(inquiries, admin_session):
    msg = send(inquiries)
    assert inquiries.view(admin_session, msg.id).is_read is True


def test_respond_marks_read_without_prior_mark_read(inquiries, admin_session, clock):
    msg = send(inquiries)
    replied_at = clock.advance(hours=2)

    answered = inquiries.respond(admin_session, msg.id, "Letter attached.")

    assert answered.is_read is True
    assert answered.admin_response == "Letter attached."
    assert answered.responded_at == replied_at
    assert answered.responded_by == "admin-1"


def test_respond_requires_text(inquiries, admin_session):
    msg = send(inquiries)
    with pytest.raises(ValidationError):
        inquiries.respond(admin_session, msg.id, "   ")
    assert inquiries.get(admin_session, msg.id).is_read is False


def test_admin_only_operations(inquiries, user_session):
    msg = send(inquiries)
    with pytest.raises(PermissionDeniedError):
        inquiries.mark_read(user_session, msg.id)
    with pytest.raises(PermissionDeniedError):
        inquiries.respond(user_session, msg.id, "hi")
    with pytest.raises(PermissionDeniedError):
        inquiries.remove(user_session, msg.id, confirm=True)
    with pytest.raises(PermissionDeniedError):
        inquiries.list_all(user_session)


def test_remove_requires_confirmation(inquiries, admin_session):
    msg = send(inquiries)
    with pytest.raises(ValidationError):
        inquiries.remove(admin_session, msg.id)
    assert [m.id for m in inquiries.list_all(admin_session)] == [msg.id]


def test_remove_then_list_excludes_message(inquiries, admin_session, clock):
    keep = send(inquiries, subject="Keep me")
    clock.advance(minutes=1)
    gone = send(inquiries, subject="Delete me")

    inquiries.remove(admin_session, gone.id, confirm=True)

    assert [m.id for m in inquiries.list_all(admin_session)] == [keep.id]
    with pytest.raises(NotFoundError):
        inquiries.remove(admin_session, gone.id, confirm=True)


def test_unread_counts(inquiries, admin_session):
    urgent = send(inquiries, priority="urgent")
    send(inquiries, priority="urgent")
    send(inquiries, priority="low")
    inquiries.mark_read(admin_session, urgent.id)

    messages = inquiries.list_all(admin_session)
    assert unread_count(messages) == 2
    assert unread_urgent_count(messages) == 1


def test_response_fields_must_be_set_together(clock):
    with pytest.raises(ValueError):
        Inquiry(
            id="m1",
            name="a",
            email="a@b.co",
            subject="s",
            body="b",
            admin_response="answer",
            created_at=clock.now,
        )


def test_normalize_category():
    assert normalize_category("Paper Submission") == "paper_submission"
    assert normalize_category("") == "general"
