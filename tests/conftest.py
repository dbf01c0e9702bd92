"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from gig_ledger.api.dependencies import get_today
from gig_ledger.api.main import create_app
from gig_ledger.infrastructure.database.models import Base
from gig_ledger.infrastructure.database.session import get_db
from gig_ledger.domain.models import RecurringObligation


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Wednesday inside the March 2024 calendar-month cycle
TODAY = date(2024, 3, 13)


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
def today() -> date:
    return TODAY


@pytest.fixture
def client(db: Session, today: date) -> TestClient:
    """Create FastAPI test client with test database and a fixed calendar date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today
    return TestClient(app)


@pytest.fixture
def rent() -> RecurringObligation:
    """Monthly expense due on the 10th"""
    return RecurringObligation(
        id="rent",
        title="Rent",
        amount=Decimal("900.00"),
        kind="expense",
        recurrence="monthly",
        anchor_date=date(2024, 1, 10),
    )


@pytest.fixture
def motorcycle_loan() -> RecurringObligation:
    """12 installments starting 2024-01-15"""
    return RecurringObligation(
        id="moto",
        title="Motorcycle",
        amount=Decimal("350.00"),
        kind="expense",
        recurrence="installments",
        anchor_date=date(2024, 1, 15),
        total_installments=12,
    )
