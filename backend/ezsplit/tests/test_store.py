"""
Tests for the data-store adapter: failures, rollback and concurrent status inserts.
"""
from datetime import timedelta
import pytest
from sqlalchemy.exc import OperationalError
from ezsplit.core.config import settings
from ezsplit.models import TransactionPaymentStatus


@pytest.fixture
def failing_status_queries(db_session, monkeypatch):
    """Make every query on the payment status table fail like a lost connection."""
    original_query = db_session.query

    def query(*entities, **kwargs):
        if TransactionPaymentStatus in entities:
            raise OperationalError("SELECT transaction_payment_status", {}, Exception("connection lost"))
        return original_query(*entities, **kwargs)

    monkeypatch.setattr(db_session, "query", query)
    return monkeypatch


def test_summary_aborts_on_store_failure(client, make_user, make_expense, failing_status_queries):
    """No partial summary is returned when one store read fails."""
    a = make_user("A")
    b = make_user("B")
    make_expense("Lunch", 100, a, [(a, 50), (b, 50)])
    
    response = client.get("/api/summary")
    assert response.status_code == 500
    assert response.json() == {"error": "Data store failure during get_payment_statuses"}
    assert "userSummary" not in response.json()


def test_payment_update_store_failure_rolls_back(client, db_session, store, failing_status_queries):
    rollbacks = []
    original_rollback = db_session.rollback

    def rollback():
        rollbacks.append(True)
        original_rollback()

    failing_status_queries.setattr(db_session, "rollback", rollback)
    
    response = client.post("/api/summary/payment/overall-1-2", json={"paid": True})
    assert response.status_code == 500
    assert response.json() == {"error": "Data store failure during upsert_payment_status"}
    assert rollbacks
    
    failing_status_queries.undo()
    assert store.get_payment_statuses() == {}


def test_concurrent_insert_falls_back_to_update(store, monkeypatch):
    """An insert that loses the race on the unique id updates the winner's row instead."""
    store.upsert_payment_status("overall-1-2", False)
    original_find = store._find_payment_status
    lookups = []

    def find_misses_first_time(transaction_id):
        lookups.append(transaction_id)
        if len(lookups) == 1:
            return None
        return original_find(transaction_id)

    monkeypatch.setattr(store, "_find_payment_status", find_misses_first_time)
    
    status = store.upsert_payment_status("overall-1-2", True)
    assert len(lookups) == 2
    assert status.paid is True
    assert status.paid_at is not None
    assert list(store.get_payment_statuses()) == ["overall-1-2"]


def test_timestamps_default_to_payment_timezone(db_session):
    status = TransactionPaymentStatus(transaction_id="overall-3-5")
    db_session.add(status)
    db_session.flush()
    offset = timedelta(hours=settings.PAYMENT_TZ_OFFSET_HOURS)
    assert status.created_at.utcoffset() == offset
    assert status.updated_at.utcoffset() == offset
