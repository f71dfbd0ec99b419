"""Read-side projections for the admin and user dashboards.

Everything here is recomputed from current snapshots on each call; nothing
is cached or stored. Revenue is always the sum of completed payment
amounts.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from portal.models.inquiry import Inquiry
from portal.models.labels import label_for
from portal.models.payment import Payment, PaymentStatus
from portal.models.submission import Submission, SubmissionStatus
from portal.services.inquiries import InquiryLifecycle, unread_count, unread_urgent_count
from portal.services.payments import PaymentLifecycle
from portal.services.profiles import ProfileService
from portal.services.session import Session
from portal.services.submissions import SubmissionLifecycle
from portal.utils.clock import Clock, utcnow


FEED_LENGTH = 8
FEED_PAPERS = 3
FEED_PAYMENTS = 3
FEED_MESSAGES = 2
REVENUE_MONTHS = 6
USER_RECENT_SUBMISSIONS = 5


def count_by_status(items: Iterable[Any], states: type[Enum]) -> dict[str, int]:
    counts = {s.value: 0 for s in states}
    for item in items:
        key = item.status.value if isinstance(item.status, Enum) else str(item.status)
        counts[key] = counts.get(key, 0) + 1
    return counts


def status_breakdown(counts: dict[str, int]) -> list[dict[str, Any]]:
    return [{"status": k, "label": label_for(k), "count": v} for k, v in counts.items()]


def _completed(payments: Iterable[Payment]) -> list[Payment]:
    return [p for p in payments if p.status == PaymentStatus.COMPLETED]


def total_revenue(payments: Iterable[Payment]) -> float:
    return sum(p.amount for p in _completed(payments))


def revenue_by_method(payments: Iterable[Payment]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for p in _completed(payments):
        totals[p.payment_method.value] = totals.get(p.payment_method.value, 0) + p.amount
    return totals


def _month_keys(now: datetime, months: int) -> list[tuple[int, int]]:
    year, month = now.year, now.month
    keys = []
    for _ in range(months):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def revenue_by_month(
    payments: Iterable[Payment], now: Optional[datetime] = None, months: int = REVENUE_MONTHS
) -> list[dict[str, Any]]:
    """Completed revenue per calendar month of ``created_at``, oldest first, empty months included."""
    keys = _month_keys(now or utcnow(), months)
    totals = {k: 0.0 for k in keys}
    for p in _completed(payments):
        key = (p.created_at.year, p.created_at.month)
        if key in totals:
            totals[key] += p.amount
    return [
        {
            "month": f"{y:04d}-{m:02d}",
            "label": datetime(y, m, 1).strftime("%b %Y"),
            "amount": totals[(y, m)],
        }
        for y, m in keys
    ]


def recent_activity(
    papers: Iterable[Submission],
    payments: Iterable[Payment],
    messages: Iterable[Inquiry],
    limit: int = FEED_LENGTH,
) -> list[dict[str, Any]]:
    newest_papers = sorted(papers, key=lambda p: p.submitted_at, reverse=True)[:FEED_PAPERS]
    newest_payments = sorted(payments, key=lambda p: p.created_at, reverse=True)[:FEED_PAYMENTS]
    newest_messages = sorted(messages, key=lambda m: m.created_at, reverse=True)[:FEED_MESSAGES]

    feed = [
        {"type": "paper", "id": p.id, "title": f"New paper submitted: {p.title}", "time": p.submitted_at}
        for p in newest_papers
    ]
    feed += [
        {
            "type": "payment",
            "id": p.id,
            "title": f"Payment {label_for(p.status)}: {p.amount:g} {p.currency.value}",
            "time": p.created_at,
        }
        for p in newest_payments
    ]
    feed += [
        {"type": "message", "id": m.id, "title": f"New message: {m.subject}", "time": m.created_at}
        for m in newest_messages
    ]
    feed.sort(key=lambda item: item["time"], reverse=True)
    return feed[:limit]


def inquiry_counts(messages: list[Inquiry]) -> dict[str, int]:
    return {
        "total": len(messages),
        "unread": unread_count(messages),
        "unread_urgent": unread_urgent_count(messages),
    }


class ReportingService:
    def __init__(
        self,
        submissions: SubmissionLifecycle,
        payments: PaymentLifecycle,
        inquiries: InquiryLifecycle,
        profiles: ProfileService,
        clock: Clock = utcnow,
        max_workers: int = 4,
    ) -> None:
        self.submissions = submissions
        self.payments = payments
        self.inquiries = inquiries
        self.profiles = profiles
        self.clock = clock
        self.max_workers = max_workers

    def admin_dashboard(self, session: Session) -> dict[str, Any]:
        session.require_admin("view the admin dashboard")
        # Each fetch reads its own collection, so they can run side by side.
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            papers_f = pool.submit(self.submissions.list_all, session)
            payments_f = pool.submit(self.payments.list_all, session)
            messages_f = pool.submit(self.inquiries.list_all, session)
            profiles_f = pool.submit(self.profiles.list_all, session)
            papers, payments = papers_f.result(), payments_f.result()
            messages, profiles = messages_f.result(), profiles_f.result()

        return {
            "total_users": len(profiles),
            "total_papers": len(papers),
            "total_payments": len(payments),
            "total_messages": len(messages),
            "total_revenue": total_revenue(payments),
            "papers_by_status": status_breakdown(count_by_status(papers, SubmissionStatus)),
            "payments_by_status": status_breakdown(count_by_status(payments, PaymentStatus)),
            "messages": inquiry_counts(messages),
            "recent_activity": recent_activity(papers, payments, messages),
        }

    def financial_summary(self, session: Session) -> dict[str, Any]:
        payments = self.payments.list_all(session)
        counts = count_by_status(payments, PaymentStatus)
        return {
            "total_revenue": total_revenue(payments),
            "pending_payments": counts[PaymentStatus.PENDING.value],
            "completed_payments": counts[PaymentStatus.COMPLETED.value],
            "failed_payments": counts[PaymentStatus.FAILED.value],
            "refunded_payments": counts[PaymentStatus.REFUNDED.value],
            "revenue_by_method": [
                {"method": m, "label": label_for(m), "amount": amount}
                for m, amount in revenue_by_method(payments).items()
            ],
            "revenue_by_month": revenue_by_month(payments, self.clock()),
        }

    def user_dashboard(self, session: Session) -> dict[str, Any]:
        papers = self.submissions.list_for_owner(session)
        payments = self.payments.list_for_owner(session)
        counts = count_by_status(papers, SubmissionStatus)
        latest = payments[0].status.value if payments else PaymentStatus.PENDING.value
        return {
            "total_submissions": len(papers),
            "accepted_papers": counts[SubmissionStatus.ACCEPTED.value],
            "pending_reviews": counts[SubmissionStatus.UNDER_REVIEW.value],
            "payment_status": latest,
            "recent_submissions": papers[:USER_RECENT_SUBMISSIONS],
        }
