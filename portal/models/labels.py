"""Display labels for every enumerated value the portal stores.

Lookups go through :func:`label_for`; unknown values fall back to the raw
string so a stale record never breaks a report.
"""

from enum import Enum


LABELS: dict[str, str] = {
    # paper review states
    "submitted": "Submitted",
    "under_review": "Under Review",
    "accepted": "Accepted",
    "rejected": "Rejected",
    "revision_required": "Revision Required",
    # payment states
    "pending": "Pending",
    "completed": "Completed",
    "failed": "Failed",
    "refunded": "Refunded",
    # payment methods
    "bank_transfer": "Bank Transfer",
    "credit_card": "Credit Card",
    "paypal": "PayPal",
    # inquiry priorities
    "low": "Low",
    "medium": "Medium",
    "high": "High",
    "urgent": "Urgent",
    # inquiry categories
    "general": "General",
    "technical": "Technical",
    "payment": "Payment",
    "paper_submission": "Paper Submission",
    "registration": "Registration",
    # participation types
    "presenter": "Presenter",
    "attendee": "Attendee",
    "keynote": "Keynote Speaker",
    "panelist": "Panelist",
    # fee types
    "early_bird": "Early Bird",
    "regular": "Regular Registration",
    "student": "Student Registration",
    "virtual": "Virtual Attendance",
}


def label_for(value: str | Enum | None) -> str:
    if value is None:
        return ""
    key = value.value if isinstance(value, Enum) else str(value)
    return LABELS.get(key, key)
