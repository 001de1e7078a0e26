"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions
- Sample data factories (users, reports, device tokens)
- Access-token auth headers
- A recording push transport standing in for Firebase
- FastAPI test client with dependency overrides
"""

import os
import uuid
from typing import List, Optional, Sequence

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
TEST_JWT_SECRET = "test-jwt-secret-key-for-dailypulse-tests-0123456789"
TEST_WEBHOOK_SECRET = "test-webhook-secret"
TEST_BASE_URL = "https://dailypulse.example.com"

os.environ['DAILYPULSE_DB_URL'] = 'sqlite:///:memory:'
os.environ['JWT_SECRET_KEY'] = TEST_JWT_SECRET
os.environ['EVENT_WEBHOOK_SECRET'] = TEST_WEBHOOK_SECRET
os.environ['APP_BASE_URL'] = TEST_BASE_URL
os.environ['NOTIFICATION_ICON_URL'] = ''

from backend.src.config.settings import get_settings
get_settings.cache_clear()

from backend.src.models import Base, DeviceToken, Report, User, UserRegion, UserRole
from backend.src.services.account_directory import AccountDirectory, DirectoryAccount
from backend.src.services.multicast_dispatcher import DeliveryResult, PushTransport
from backend.src.services.notification_composer import NotificationPayload
from backend.src.services.report_events import ReportCreatedEvent


# ============================================================================
# Test Doubles
# ============================================================================

class RecordingTransport(PushTransport):
    """
    PushTransport that records payloads instead of calling Firebase.

    Per-token results come from `failures` (token -> DeliveryResult);
    every other token is delivered. Set `error` to make the batched call fail.
    """

    def __init__(self):
        self.payloads: List[NotificationPayload] = []
        self.failures = {}
        self.error: Optional[Exception] = None

    async def send_multicast(self, payload: NotificationPayload) -> List[DeliveryResult]:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return [
            self.failures.get(token, DeliveryResult.delivered(f"msg-{index}"))
            for index, token in enumerate(payload.tokens)
        ]

    @property
    def call_count(self) -> int:
        return len(self.payloads)


class StaticDirectory(AccountDirectory):
    """
    In-memory AccountDirectory.

    Set admins_error / managers_error to make the matching query raise.
    """

    def __init__(self, accounts: Sequence[DirectoryAccount] = ()):
        self.accounts = list(accounts)
        self.admins_error: Optional[Exception] = None
        self.managers_error: Optional[Exception] = None
        self.manager_queries: List[str] = []

    async def list_admins(self) -> List[DirectoryAccount]:
        if self.admins_error is not None:
            raise self.admins_error
        return [a for a in self.accounts if a.role == UserRole.ADMIN.value]

    async def list_regional_managers(self, region: str) -> List[DirectoryAccount]:
        self.manager_queries.append(region)
        if self.managers_error is not None:
            raise self.managers_error
        return [
            a for a in self.accounts
            if a.role == UserRole.RSM.value and region in a.regions
        ]


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    # This must be set for each connection
    def _fk_pragma_on_connect(dbapi_con, con_record):
        dbapi_con.execute('pragma foreign_keys=ON')

    event.listen(engine, 'connect', _fk_pragma_on_connect)

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )


@pytest.fixture(scope='function')
def test_db_session(test_session_factory):
    """Create a test database session."""
    session = test_session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Test Double Fixtures
# ============================================================================

@pytest.fixture
def recording_transport():
    """Push transport that records sends and delivers every token."""
    return RecordingTransport()


@pytest.fixture
def static_directory():
    """Factory for an in-memory account directory."""
    def _create(*accounts: DirectoryAccount) -> StaticDirectory:
        return StaticDirectory(accounts)
    return _create


@pytest.fixture
def directory_account():
    """Factory for DirectoryAccount values."""
    def _create(account_id, role=UserRole.ADMIN, regions=(), push_tokens=()):
        return DirectoryAccount(
            account_id=account_id,
            role=role.value if isinstance(role, UserRole) else role,
            regions=tuple(regions),
            push_tokens=list(push_tokens) if isinstance(push_tokens, tuple) else push_tokens,
        )
    return _create


@pytest.fixture
def report_event():
    """Factory for ReportCreatedEvent values."""
    def _create(
        report_id='rpt_01hgw2bbg0000000000000001',
        submitted_by='usr_submitter',
        submitted_by_name='Ravi Kumar',
        submitted_by_role='User',
        submitted_by_region='North',
        location_name='ASC-7',
    ):
        return ReportCreatedEvent(
            report_id=report_id,
            submitted_by=submitted_by,
            submitted_by_name=submitted_by_name,
            submitted_by_role=submitted_by_role,
            submitted_by_region=submitted_by_region,
            location_name=location_name,
        )
    return _create


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def sample_user(test_db_session):
    """Factory for creating sample User models in the database."""
    def _create(
        email=None,
        role=UserRole.USER,
        display_name='Test User',
        regions=(),
        tokens=(),
        is_active=True,
    ):
        user = User(
            email=email or f'user-{uuid.uuid4().hex[:10]}@example.com',
            display_name=display_name,
            role=role,
            is_active=is_active,
        )
        user.region_assignments = [UserRegion(region=region) for region in regions]
        user.device_tokens = [DeviceToken(token=token) for token in tokens]
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)
        return user
    return _create


@pytest.fixture
def sample_report(test_db_session):
    """Factory for creating sample Report models in the database."""
    def _create(submitter, location_name='ASC-7', region=None, **metrics):
        report = Report(
            submitted_by_id=submitter.id,
            submitted_by_name=submitter.display_name,
            submitted_by_role=submitter.role.value,
            submitted_by_region=region if region is not None else (
                submitter.regions[0] if submitter.regions else None
            ),
            location_name=location_name,
            **metrics,
        )
        test_db_session.add(report)
        test_db_session.commit()
        test_db_session.refresh(report)
        return report
    return _create


@pytest.fixture
def auth_headers(test_db_session):
    """Factory for Authorization headers carrying a valid access token."""
    from backend.src.services.token_service import TokenService

    def _create(user):
        token = TokenService(test_db_session, TEST_JWT_SECRET).create_access_token(user)
        return {'Authorization': f'Bearer {token}'}
    return _create


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def report_events():
    """Events handed to the report-created background handler."""
    return []


@pytest.fixture
def test_client(test_db_session, recording_transport, report_events):
    """Create a test client for FastAPI application."""
    from fastapi.testclient import TestClient

    from backend.src.api.events import get_report_notification_service
    from backend.src.api.reports import get_report_event_handler
    from backend.src.db.database import get_db
    from backend.src.main import app
    from backend.src.services.report_notification_service import ReportNotificationService
    from backend.src.utils.rate_limiter import limiter

    def get_test_db():
        yield test_db_session

    async def record_event(event):
        report_events.append(event)

    def get_test_notification_service():
        return ReportNotificationService.from_settings(
            test_db_session, transport=recording_transport
        )

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_report_event_handler] = lambda: record_event
    app.dependency_overrides[get_report_notification_service] = get_test_notification_service

    limiter.reset()
    with TestClient(app) as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()
