"""
Shared fixtures: an in-memory SQLite database behind the get_db dependency.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import ezsplit.models  # noqa: F401
from ezsplit.db.base import Base
from ezsplit.db.session import get_db
from ezsplit.main import app
from ezsplit.models import User, Expense, Participant
from ezsplit.services.store import LedgerStore


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def store(db_session):
    return LedgerStore(db_session)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(name, bank_account=None, bank_name="VPB"):
        user = User(name=name, bank_account=bank_account, bank_name=bank_name)
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture
def make_expense(db_session):
    """Create an expense; shares is a list of (user, amount)."""
    def _make_expense(name, amount, payer, shares):
        expense = Expense(name=name, amount=Decimal(str(amount)), payer_id=payer.id)
        db_session.add(expense)
        db_session.flush()
        for user, share in shares:
            db_session.add(Participant(expense_id=expense.id, user_id=user.id, amount=Decimal(str(share))))
        db_session.commit()
        return expense
    return _make_expense
