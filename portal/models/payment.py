from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from portal.models.common import Record, Timestamp


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    CNY = "CNY"
    INR = "INR"


class FeeOption(BaseModel):
    code: str
    amount: float
    description: str


FEE_SCHEDULE: tuple[FeeOption, ...] = (
    FeeOption(code="early_bird", amount=450, description="Full conference access with 20% discount"),
    FeeOption(code="regular", amount=550, description="Full conference access"),
    FeeOption(code="student", amount=350, description="Student discount (ID required)"),
    FeeOption(code="virtual", amount=200, description="Online participation only"),
)

SLIP_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}
MAX_SLIP_BYTES = 5 * 1024 * 1024


class Payment(Record):
    user_id: str
    amount: float = Field(..., gt=0)
    currency: Currency = Currency.USD
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    payment_slip_name: Optional[str] = None
    payment_slip_size: Optional[int] = None
    payment_slip_path: Optional[str] = None
    processed_at: Optional[Timestamp] = None
    processed_by: Optional[str] = None
