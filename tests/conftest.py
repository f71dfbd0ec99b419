from datetime import datetime, timedelta, timezone

import pytest

from portal.models.common import FileUpload, Principal, Role
from portal.server import create_app
from portal.services.auth import StaticTokenAuth
from portal.services.container import Services
from portal.services.gateway import InMemoryGateway
from portal.services.inquiries import InquiryLifecycle
from portal.services.payments import PaymentLifecycle
from portal.services.profiles import ProfileService
from portal.services.reporting import ReportingService
from portal.services.session import Session
from portal.services.storage import LocalStorage
from portal.services.submissions import SubmissionLifecycle


ABSTRACT = (
    "This paper examines how digital rights are eroded in armed conflict, drawing on network "
    "shutdown records and interviews with journalists working in three affected regions."
)

ADMIN = Principal(id="admin-1", display_name="Conference Admin", role=Role.ADMIN)
USER = Principal(id="U1", display_name="Ada Author", email="ada@example.org", role=Role.USER)
OTHER_USER = Principal(id="U2", display_name="Bo Author", role=Role.USER)

TOKENS = {"admin-token": ADMIN, "user-token": USER, "other-token": OTHER_USER}


class FakeClock:
    def __init__(self, start: datetime = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def pdf(name: str = "paper.pdf", size: int | None = None) -> FileUpload:
    return FileUpload(name=name, content_type="application/pdf", data=b"%PDF-1.4 sample", size=size)


def png(name: str = "slip.png", size: int | None = None) -> FileUpload:
    return FileUpload(name=name, content_type="image/png", data=b"\x89PNG sample", size=size)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "uploads")


@pytest.fixture
def admin_session():
    return Session(ADMIN)


@pytest.fixture
def user_session():
    return Session(USER)


@pytest.fixture
def other_session():
    return Session(OTHER_USER)


@pytest.fixture
def submissions(gateway, storage, clock):
    return SubmissionLifecycle(gateway, storage, clock)


@pytest.fixture
def payments(gateway, storage, clock):
    return PaymentLifecycle(gateway, storage, clock)


@pytest.fixture
def inquiries(gateway, clock):
    return InquiryLifecycle(gateway, clock=clock)


@pytest.fixture
def profiles(gateway, clock):
    return ProfileService(gateway, clock=clock)


@pytest.fixture
def reporting(submissions, payments, inquiries, profiles, clock):
    return ReportingService(submissions, payments, inquiries, profiles, clock)


@pytest.fixture
def services(gateway, storage, clock):
    return Services.build(gateway=gateway, storage=storage, auth=StaticTokenAuth(TOKENS), clock=clock)


@pytest.fixture
def client(services):
    app = create_app(services)
    app.config["TESTING"] = True
    return app.test_client()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
