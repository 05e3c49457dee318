"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date, timedelta
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, Session
from amc_portal.api.main import create_app
from amc_portal.infrastructure.database.models import Base
from amc_portal.infrastructure.database.session import get_db
from amc_portal.domain.models import Client, PaymentRecord, WorkLogEntry


# In-memory test database, shared by the session and the TestClient thread
TEST_DATABASE_URL = "sqlite://"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

AS_OF = date(2024, 3, 1)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def monthly_client() -> Client:
    """1200 hours a year billed monthly, 120000 contract, AMC ending in 45 days"""
    return Client(
        id=uuid.uuid4(),
        cost_for_year=120000,
        hours_assigned_year=1200,
        payment_term="Monthly",
        amc_start_date=AS_OF - timedelta(days=320),
        amc_end_date=AS_OF + timedelta(days=45),
        project_name="Storefront",
    )


@pytest.fixture
def sample_work_logs(monthly_client: Client) -> List[WorkLogEntry]:
    """85 hours consumed across three entries"""
    return [
        WorkLogEntry(client_id=monthly_client.id, hours_consumed=40, date=AS_OF - timedelta(days=20)),
        WorkLogEntry(client_id=monthly_client.id, hours_consumed=30, date=AS_OF - timedelta(days=10)),
        WorkLogEntry(client_id=monthly_client.id, hours_consumed=15, date=AS_OF - timedelta(days=2)),
    ]


@pytest.fixture
def sample_payments(monthly_client: Client) -> List[PaymentRecord]:
    """50000 paid in two instalments"""
    return [
        PaymentRecord(client_id=monthly_client.id, amount_paid=30000, payment_date=AS_OF - timedelta(days=90)),
        PaymentRecord(client_id=monthly_client.id, amount_paid=20000, payment_date=AS_OF - timedelta(days=30)),
    ]
