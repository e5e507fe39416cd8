"""
Ledger builder: folds expenses and participant shares into per-user totals.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set
from ezsplit.core.utils import to_decimal, round_money
from ezsplit.schemas.summary import UserAggregate

logger = logging.getLogger(__name__)


class UserBalance:
    """Running totals for one user. Amounts are kept as unrounded Decimals."""
    def __init__(self, user_id: int, name: str, bank_account: Optional[str] = None, bank_name: Optional[str] = None):
        self.id = user_id
        self.name = name
        self.bank_account = bank_account
        self.bank_name = bank_name
        self.paid = Decimal(0)
        self.spent = Decimal(0)
        self.received = Decimal(0)
        self.pending = Decimal(0)

    @property
    def balance(self) -> Decimal:
        """Net position: positive is owed money, negative owes money."""
        return self.paid - self.spent

    def to_aggregate(self) -> UserAggregate:
        return UserAggregate(
            id=self.id,
            name=self.name,
            paid=round_money(self.paid),
            spent=round_money(self.spent),
            balance=round_money(self.balance),
            received=round_money(self.received),
            pending=round_money(self.pending),
            bank_account=self.bank_account,
            bank_name=self.bank_name
        )


class Ledger:
    """
    Request-scoped result of folding the raw records.
    
    balances: user id -> UserBalance, one per known user in user order
    expenses: expense id -> expense record, in the order given
    participants_by_expense: expense id -> participant shares, in the order given
    user_expenses: user id -> ids of expenses the user participates in
    """
    def __init__(self):
        self.balances: Dict[int, UserBalance] = {}
        self.expenses: Dict[int, object] = {}
        self.participants_by_expense: Dict[int, List[object]] = {}
        self.user_expenses: Dict[int, Set[int]] = {}

    def aggregates(self) -> List[UserAggregate]:
        return [balance.to_aggregate() for balance in self.balances.values()]

    def related_expense_names(self, debtor_id: int, creditor_id: int) -> List[str]:
        """Names of expenses the debtor participates in and the creditor paid for."""
        expense_ids = self.user_expenses.get(debtor_id, set())
        return [
            expense.name for expense_id, expense in self.expenses.items()
            if expense_id in expense_ids and expense.payer_id == creditor_id and expense.name
        ]


def build_ledger(users: Iterable, expenses: Iterable, participants: Iterable) -> Ledger:
    """
    Build per-user paid/spent totals and the lookup indexes used by settlement.
    
    Every known user gets an entry, even with no activity. Payers and
    participants that reference unknown users are skipped.
    """
    ledger = Ledger()
    
    for user in users:
        ledger.balances[user.id] = UserBalance(user.id, user.name, user.bank_account, user.bank_name)
        ledger.user_expenses[user.id] = set()
    
    for expense in expenses:
        ledger.expenses[expense.id] = expense
        ledger.participants_by_expense[expense.id] = []
        payer = ledger.balances.get(expense.payer_id)
        if payer is not None:
            payer.paid += to_decimal(expense.amount)
        else:
            logger.debug(f"Expense {expense.id} payer {expense.payer_id} is not a known user; skipped")
    
    for participant in participants:
        ledger.participants_by_expense.setdefault(participant.expense_id, []).append(participant)
        user = ledger.balances.get(participant.user_id)
        if user is None:
            logger.debug(f"Participant of expense {participant.expense_id} references unknown user {participant.user_id}; skipped")
            continue
        user.spent += to_decimal(participant.amount)
        ledger.user_expenses[participant.user_id].add(participant.expense_id)
    
    return ledger
