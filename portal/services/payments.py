"""Registration payments.

Users upload a payment slip against one of the registration fees; the
record starts ``pending`` and an admin reconciles it. Any status may follow
any other. Reaching ``completed`` stamps ``processed_at``, which is kept
when the payment later moves on (e.g. to ``refunded``).
"""

import time
from typing import Optional
from uuid import uuid4

from portal.errors import ValidationError
from portal.models.common import FileUpload
from portal.models.labels import label_for
from portal.models.payment import (
    FEE_SCHEDULE,
    MAX_SLIP_BYTES,
    SLIP_CONTENT_TYPES,
    Currency,
    FeeOption,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from portal.services.base import Lifecycle, new_id
from portal.services.gateway import PAYMENTS
from portal.services.session import Session
from portal.services.storage import PAYMENTS_FOLDER
from portal.utils.clock import iso
from portal.utils.config import CONFERENCE_CODE
from portal.utils.logger import get_logger
from portal.utils.validation import coerce_enum, mib


logger = get_logger("payments")


def new_transaction_id() -> str:
    # Millisecond timestamp alone collides for same-instant uploads.
    return f"TXN{int(time.time() * 1000)}{uuid4().hex[:8].upper()}"


def fee_schedule() -> list[FeeOption]:
    return list(FEE_SCHEDULE)


def _parse_amount(amount) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number") from None
    if value <= 0:
        raise ValidationError("Amount must be positive")
    if value not in {fee.amount for fee in FEE_SCHEDULE}:
        allowed = ", ".join(f"{fee.amount:g}" for fee in FEE_SCHEDULE)
        raise ValidationError(f"Amount must match a registration fee ({allowed})")
    return value


def validate_slip(slip: Optional[FileUpload]) -> FileUpload:
    if slip is None:
        raise ValidationError("Please select a payment slip to upload")
    if slip.content_type not in SLIP_CONTENT_TYPES:
        raise ValidationError("Please upload a JPG, PNG, or PDF file")
    if slip.byte_size > MAX_SLIP_BYTES:
        raise ValidationError(f"File size must be less than {mib(MAX_SLIP_BYTES)}")
    return slip


class PaymentLifecycle(Lifecycle):
    def record_payment(
        self,
        session: Session,
        amount,
        currency,
        method,
        slip_file: Optional[FileUpload],
        notes: Optional[str] = None,
    ) -> Payment:
        owner = session.require_user()
        value = _parse_amount(amount)
        currency = coerce_enum(Currency, currency or Currency.USD.value, "currency")
        method = coerce_enum(PaymentMethod, method, "payment_method")
        slip = validate_slip(slip_file)
        notes = (notes or "").strip() or f"{label_for(method)} payment for {CONFERENCE_CODE} registration"

        now = self.clock()

        def build(path: str) -> dict:
            return Payment(
                id=new_id(),
                user_id=owner.id,
                amount=value,
                currency=currency,
                status=PaymentStatus.PENDING,
                payment_method=method,
                transaction_id=new_transaction_id(),
                notes=notes,
                payment_slip_name=slip.name,
                payment_slip_size=slip.byte_size,
                payment_slip_path=path,
                created_at=now,
                updated_at=now,
            ).to_record()

        payment = Payment.model_validate(self._store_and_create(PAYMENTS, PAYMENTS_FOLDER, slip, build))
        logger.info(
            "Payment %s recorded for %s: %s %s via %s",
            payment.transaction_id, owner.id, payment.amount, payment.currency.value, payment.payment_method.value,
        )
        session.emit("payment.recorded", id=payment.id, status=payment.status.value)
        return payment

    def update_status(
        self,
        session: Session,
        payment_id: str,
        new_status,
        expected_version: Optional[int] = None,
    ) -> Payment:
        admin = session.require_admin("update payment status")
        status = coerce_enum(PaymentStatus, new_status, "status")

        now = iso(self.clock())
        patch = {"status": status.value, "processed_by": admin.id, "updated_at": now}
        if status == PaymentStatus.COMPLETED:
            patch["processed_at"] = now
        payment = Payment.model_validate(self.gateway.update(PAYMENTS, payment_id, patch, expected_version))
        logger.info("Payment %s set to %s by %s", payment_id, status.value, admin.id)
        session.emit("payment.status_changed", id=payment_id, status=status.value)
        return payment

    def get(self, session: Session, payment_id: str) -> Payment:
        payment = Payment.model_validate(self.gateway.get(PAYMENTS, payment_id))
        session.require_owner_or_admin(payment.user_id)
        return payment

    def list_for_owner(self, session: Session, owner_id: Optional[str] = None) -> list[Payment]:
        owner_id = owner_id or session.require_user().id
        session.require_owner_or_admin(owner_id)
        rows = self.gateway.list(PAYMENTS, filters={"user_id": owner_id}, sort={"created_at": -1})
        return [Payment.model_validate(r) for r in rows]

    def list_all(self, session: Session) -> list[Payment]:
        session.require_admin("list all payments")
        rows = self.gateway.list(PAYMENTS, sort={"created_at": -1})
        return [Payment.model_validate(r) for r in rows]

    @staticmethod
    def fee_schedule() -> list[FeeOption]:
        return fee_schedule()
