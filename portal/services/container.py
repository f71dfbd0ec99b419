from dataclasses import dataclass
from typing import Optional

from portal.services.auth import Authenticator, get_authenticator
from portal.services.gateway import Gateway, get_gateway
from portal.services.inquiries import InquiryLifecycle
from portal.services.payments import PaymentLifecycle
from portal.services.profiles import ProfileService
from portal.services.reporting import ReportingService
from portal.services.session import EventChannel
from portal.services.storage import Storage, get_storage
from portal.services.submissions import SubmissionLifecycle
from portal.utils.clock import Clock, utcnow


@dataclass
class Services:
    """Everything a request handler needs, wired once per app."""

    gateway: Gateway
    storage: Storage
    auth: Authenticator
    events: EventChannel
    submissions: SubmissionLifecycle
    payments: PaymentLifecycle
    inquiries: InquiryLifecycle
    profiles: ProfileService
    reporting: ReportingService

    @classmethod
    def build(
        cls,
        gateway: Optional[Gateway] = None,
        storage: Optional[Storage] = None,
        auth: Optional[Authenticator] = None,
        clock: Clock = utcnow,
    ) -> "Services":
        gateway = gateway or get_gateway()
        storage = storage or get_storage()
        submissions = SubmissionLifecycle(gateway, storage, clock)
        payments = PaymentLifecycle(gateway, storage, clock)
        inquiries = InquiryLifecycle(gateway, clock=clock)
        profiles = ProfileService(gateway, clock=clock)
        return cls(
            gateway=gateway,
            storage=storage,
            auth=auth or get_authenticator(),
            events=EventChannel(),
            submissions=submissions,
            payments=payments,
            inquiries=inquiries,
            profiles=profiles,
            reporting=ReportingService(submissions, payments, inquiries, profiles, clock),
        )
