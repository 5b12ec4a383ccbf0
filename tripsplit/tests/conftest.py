"""
Shared fixtures: snapshot builders and an in-memory database for API tests.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tripsplit.db.base import Base
from tripsplit.db.session import get_db, init_db
from tripsplit.main import app
from tripsplit.schemas.expense import ExpenseSnapshot
from tripsplit.schemas.member import MemberSnapshot


def make_member(id: int, name: str, payment_handle=None) -> MemberSnapshot:
    """Create a member snapshot for testing."""
    return MemberSnapshot(id=id, name=name, payment_handle=payment_handle)


def make_expense(id: int, payer_id: int, amount, participant_ids, category="food") -> ExpenseSnapshot:
    """Create an expense snapshot for testing."""
    return ExpenseSnapshot(
        id=id,
        payer_id=payer_id,
        amount=Decimal(str(amount)),
        participant_ids=participant_ids,
        category=category,
    )


@pytest.fixture
def members():
    """A(1), B(2), C(3) in insertion order."""
    return [
        make_member(1, "A", "a@upi"),
        make_member(2, "B"),
        make_member(3, "C", "c@upi"),
    ]


@pytest.fixture
def example_a_expenses():
    return [
        make_expense(1, payer_id=1, amount=90, participant_ids=[1, 2, 3]),
        make_expense(2, payer_id=2, amount=30, participant_ids=[2, 3]),
    ]


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test database session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
