"""
Tests for the ledger builder.
"""
from decimal import Decimal
from types import SimpleNamespace
from ezsplit.services.ledger_service import build_ledger


def user(uid, name):
    return SimpleNamespace(id=uid, name=name, bank_account=None, bank_name=None)


def expense(eid, name, amount, payer_id):
    return SimpleNamespace(id=eid, name=name, amount=Decimal(str(amount)), payer_id=payer_id)


def share(expense_id, user_id, amount):
    return SimpleNamespace(expense_id=expense_id, user_id=user_id, amount=Decimal(str(amount)))


def test_lunch_scenario():
    """Payer of a split lunch is owed the other half."""
    ledger = build_ledger(
        [user(1, "A"), user(2, "B")],
        [expense(1, "Lunch", 100000, 1)],
        [share(1, 1, 50000), share(1, 2, 50000)]
    )
    a, b = ledger.aggregates()
    assert (a.paid, a.spent, a.balance) == (100000, 50000, 50000)
    assert (b.paid, b.spent, b.balance) == (0, 50000, -50000)


def test_users_without_activity_have_zero_totals():
    """Every known user is listed even with no expenses."""
    ledger = build_ledger([user(1, "A"), user(2, "B"), user(3, "C")], [expense(1, "Taxi", 30, 1)], [share(1, 2, 30)])
    c = ledger.aggregates()[2]
    assert c.id == 3
    assert (c.paid, c.spent, c.balance, c.received, c.pending) == (0, 0, 0, 0, 0)


def test_unknown_users_are_skipped():
    """Dangling payer or participant references are left out of the totals."""
    ledger = build_ledger(
        [user(1, "A")],
        [expense(1, "Dinner", 90, 1), expense(2, "Ghost", 50, 99)],
        [share(1, 1, 30), share(1, 42, 60), share(2, 1, 50)]
    )
    assert list(ledger.balances) == [1]
    a = ledger.balances[1]
    assert a.paid == Decimal("90")
    assert a.spent == Decimal("80")
    assert 42 not in ledger.user_expenses


def test_balances_sum_to_zero():
    """Balance conservation when shares cover each expense."""
    ledger = build_ledger(
        [user(1, "A"), user(2, "B"), user(3, "C")],
        [expense(1, "Hotel", "300.00", 1), expense(2, "Fuel", "45.30", 2)],
        [
            share(1, 1, "100.00"), share(1, 2, "100.00"), share(1, 3, "100.00"),
            share(2, 1, "15.10"), share(2, 2, "15.10"), share(2, 3, "15.10"),
        ]
    )
    assert sum(b.balance for b in ledger.balances.values()) == 0
    assert abs(sum(a.balance for a in ledger.aggregates())) < 0.01


def test_decimal_accumulation_does_not_drift():
    """Many small amounts add up exactly."""
    expenses = [expense(i, f"Coffee {i}", "0.10", 1) for i in range(1, 1001)]
    shares = [share(i, 2, "0.10") for i in range(1, 1001)]
    ledger = build_ledger([user(1, "A"), user(2, "B")], expenses, shares)
    assert ledger.balances[1].paid == Decimal("100.00")
    assert ledger.balances[2].balance == Decimal("-100.00")


def test_indexes_keep_order():
    """Participant shares are grouped per expense in the order given."""
    ledger = build_ledger(
        [user(1, "A"), user(2, "B")],
        [expense(1, "Lunch", 20, 1), expense(2, "Snacks", 10, 2)],
        [share(2, 1, 5), share(1, 2, 10), share(1, 1, 10), share(2, 2, 5)]
    )
    assert [p.user_id for p in ledger.participants_by_expense[1]] == [2, 1]
    assert [p.user_id for p in ledger.participants_by_expense[2]] == [1, 2]
    assert ledger.user_expenses[1] == {1, 2}


def test_related_expense_names():
    """Only expenses the creditor paid and the debtor joined are related."""
    ledger = build_ledger(
        [user(1, "A"), user(2, "B"), user(3, "C")],
        [expense(1, "Lunch", 20, 1), expense(2, "Taxi", 10, 1), expense(3, "Museum", 30, 3)],
        [share(1, 2, 10), share(2, 3, 10), share(3, 2, 15)]
    )
    assert ledger.related_expense_names(2, 1) == ["Lunch"]
    assert ledger.related_expense_names(2, 3) == ["Museum"]
    assert ledger.related_expense_names(3, 2) == []
