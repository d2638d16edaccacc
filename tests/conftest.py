"""Pytest fixtures for testing"""

import os

# Must be set before finance_tracker.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.domain.models import EMIRecord, ExpenseRecord, IncomeRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    app = create_app(create_tables=False)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def register_user(client: TestClient, email: str = "asha@example.com", password: str = "secret123") -> dict:
    response = client.post(
        "/v1/auth/register",
        json={"name": "Asha", "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    """Bearer header for a freshly registered user"""
    data = register_user(client)
    return {"Authorization": f"Bearer {data['access_token']}"}


def make_expense(
    record_id: str = "exp-1",
    day: date = date(2024, 3, 10),
    amount: str = "500",
    category: str = "Food",
    recurring_type: str | None = None,
    payment_mode: str = "Cash",
) -> ExpenseRecord:
    return ExpenseRecord(
        id=record_id,
        user_id="user-1",
        date=day,
        amount=Decimal(amount),
        category=category,
        payment_mode=payment_mode,
        is_recurring=recurring_type is not None,
        recurring_type=recurring_type,
    )


def make_income(
    record_id: str = "inc-1",
    day: date = date(2024, 6, 1),
    amount: str = "50000",
    source: str = "Salary",
    recurring_type: str | None = None,
) -> IncomeRecord:
    return IncomeRecord(
        id=record_id,
        user_id="user-1",
        date=day,
        amount=Decimal(amount),
        source=source,
        is_recurring=recurring_type is not None,
        recurring_type=recurring_type,
    )


def make_emi(
    record_id: str = "emi-1",
    start: date = date(2024, 1, 15),
    due_day: int = 15,
    total_months: int = 12,
    amount: str = "2500",
    name: str = "Car Loan",
) -> EMIRecord:
    return EMIRecord(
        id=record_id,
        user_id="user-1",
        name=name,
        amount=Decimal(amount),
        start_date=start,
        due_day=due_day,
        total_months=total_months,
        payment_account_id="acct-1",
    )
