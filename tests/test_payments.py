"""
Tests for payment recording and status reconciliation.
"""

import re

import pytest

from portal.errors import ConflictError, GatewayError, NotFoundError, PermissionDeniedError, ValidationError
from portal.models.common import FileUpload
from portal.models.payment import Currency, PaymentMethod, PaymentStatus
from portal.services.payments import fee_schedule, new_transaction_id
from tests.conftest import pdf, png


MiB = 1024 * 1024


def record(payments, session, **overrides):
    args = {"amount": 450, "currency": "USD", "method": "bank_transfer", "slip_file": png()}
    args.update(overrides)
    return payments.record_payment(session, **args)


def test_record_payment_creates_pending(payments, user_session, clock):
    payment = record(payments, user_session)

    assert payment.status == PaymentStatus.PENDING
    assert payment.user_id == "U1"
    assert payment.amount == 450
    assert payment.currency == Currency.USD
    assert payment.payment_method == PaymentMethod.BANK_TRANSFER
    assert payment.created_at == clock.now
    assert payment.processed_at is None
    assert payment.payment_slip_name == "slip.png"
    assert payment.payment_slip_path.startswith("payments/")
    assert payment.notes == "Bank Transfer payment for ICHR2026 registration"


def test_record_payment_keeps_user_notes(payments, user_session):
    payment = record(payments, user_session, notes="Paid from university account")
    assert payment.notes == "Paid from university account"


def test_accepts_four_mib_slip(payments, user_session):
    payment = record(payments, user_session, slip_file=png(size=4 * MiB))
    assert payment.payment_slip_size == 4 * MiB


def test_rejects_six_mib_slip(payments, user_session, gateway):
    with pytest.raises(ValidationError) as exc:
        record(payments, user_session, slip_file=pdf(name="slip.pdf", size=6 * MiB))
    assert exc.value.message == "File size must be less than 5MB"
    assert gateway.list("payments") == []


def test_rejects_disallowed_slip_type(payments, user_session, gateway):
    text = FileUpload(name="slip.txt", content_type="text/plain", data=b"paid")
    with pytest.raises(ValidationError):
        record(payments, user_session, slip_file=text)
    assert gateway.list("payments") == []


def test_requires_slip(payments, user_session):
    with pytest.raises(ValidationError) as exc:
        record(payments, user_session, slip_file=None)
    assert exc.value.message == "Please select a payment slip to upload"


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 999},
        {"amount": -450},
        {"amount": "abc"},
        {"currency": "GBP"},
        {"method": "cash"},
    ],
)
def test_rejects_invalid_payment_details(payments, user_session, gateway, overrides):
    with pytest.raises(ValidationError):
        record(payments, user_session, **overrides)
    assert gateway.list("payments") == []


@pytest.mark.parametrize("fee", [f.amount for f in fee_schedule()])
def test_every_scheduled_fee_is_accepted(payments, user_session, fee):
    assert record(payments, user_session, amount=str(fee)).amount == fee


def test_transaction_ids_are_unique():
    ids = {new_transaction_id() for _ in range(200)}
    assert len(ids) == 200
    assert all(re.fullmatch(r"TXN\d{13}[0-9A-F]{8}", t) for t in ids)


def test_completed_sets_processed_at_and_failed_keeps_it(payments, user_session, admin_session, clock):
    payment = record(payments, user_session)
    completed_at = clock.advance(days=1)

    completed = payments.update_status(admin_session, payment.id, "completed")
    assert completed.status == PaymentStatus.COMPLETED
    assert completed.processed_at == completed_at
    assert completed.processed_by == "admin-1"

    clock.advance(days=1)
    failed = payments.update_status(admin_session, payment.id, "failed")
    assert failed.status == PaymentStatus.FAILED
    assert failed.processed_at == completed_at


def test_non_completed_status_leaves_processed_at_unset(payments, user_session, admin_session):
    payment = record(payments, user_session)
    refunded = payments.update_status(admin_session, payment.id, "refunded")
    assert refunded.status == PaymentStatus.REFUNDED
    assert refunded.processed_at is None


def test_update_status_is_admin_only(payments, user_session):
    payment = record(payments, user_session)
    with pytest.raises(PermissionDeniedError):
        payments.update_status(user_session, payment.id, "completed")


def test_update_status_unknown_payment(payments, admin_session):
    with pytest.raises(NotFoundError):
        payments.update_status(admin_session, "missing", "completed")


def test_update_status_rejects_unknown_status(payments, user_session, admin_session):
    payment = record(payments, user_session)
    with pytest.raises(ValidationError):
        payments.update_status(admin_session, payment.id, "settled")


def test_update_status_version_conflict(payments, user_session, admin_session):
    payment = record(payments, user_session)
    payments.update_status(admin_session, payment.id, "completed", expected_version=1)
    with pytest.raises(ConflictError):
        payments.update_status(admin_session, payment.id, "failed", expected_version=1)


def test_list_for_owner_newest_first(payments, user_session, other_session, clock):
    first = record(payments, user_session)
    clock.advance(hours=1)
    second = record(payments, user_session, amount=200, method="paypal")
    record(payments, other_session)

    assert [p.id for p in payments.list_for_owner(user_session)] == [second.id, first.id]
    with pytest.raises(PermissionDeniedError):
        payments.list_all(user_session)


def test_failed_write_removes_uploaded_slip(payments, user_session, gateway, storage, monkeypatch):
    def broken_create(collection, record):
        raise GatewayError("create on payments failed")

    monkeypatch.setattr(gateway, "create", broken_create)
    with pytest.raises(GatewayError):
        record(payments, user_session)
    assert list((storage.root / "payments").iterdir()) == []
