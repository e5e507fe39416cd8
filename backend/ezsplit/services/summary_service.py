"""
Summary service composing the ledger, settlement planner and payment status
into the views served by the summary routes.

The global summary uses netted transfers ("overall-" ids); the per-expense
views use raw participant -> payer obligations ("{expense}-" ids). The two
sets are intentionally kept apart.
"""
import logging
from typing import Dict, List
from ezsplit.core.utils import round_money
from ezsplit.schemas.summary import (
    SummaryResponse, SettlementTransaction, ExpenseTransaction, ExpenseSummaryResponse,
    ExpenseWithStatus, ExpenseTransactionsGroup, PaymentStatusResponse
)
from ezsplit.services.store import LedgerStore
from ezsplit.services.ledger_service import Ledger, build_ledger
from ezsplit.services.settlement_service import plan_settlement
from ezsplit.services.expense_service import expense_to_response, group_participants
from ezsplit.services.payment_status_service import (
    Obligation, expense_obligations, overall_transaction_id, resolve_status, lookup_statuses, all_completed
)

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown"


def _apply_payment_progress(ledger: Ledger, stored: Dict) -> None:
    """Fill received/pending of each payee from per-expense obligations and their paid flags."""
    obligations: Dict[str, Obligation] = {}
    for expense_id, expense in ledger.expenses.items():
        for obligation in expense_obligations(expense, ledger.participants_by_expense.get(expense_id, [])):
            obligations[obligation.transaction_id] = obligation
    
    for transaction_id, obligation in obligations.items():
        payee = ledger.balances.get(obligation.to_user_id)
        if payee is None:
            continue
        status = stored.get(transaction_id)
        if status is not None and status.paid:
            payee.received += obligation.amount
        else:
            payee.pending += obligation.amount


def get_summary(store: LedgerStore) -> SummaryResponse:
    """Per-user totals of every user plus the netted settlement with payment status."""
    users = store.list_users()
    expenses = store.list_expenses()
    participants = store.list_participants()
    stored = store.get_payment_statuses()
    
    ledger = build_ledger(users, expenses, participants)
    _apply_payment_progress(ledger, stored)
    transfers = plan_settlement(ledger)
    logger.debug(f"Summary: {len(users)} users, {len(expenses)} expenses, {len(transfers)} transfers")
    
    transactions = []
    for transfer in transfers:
        debtor = ledger.balances[transfer.from_user_id]
        creditor = ledger.balances[transfer.to_user_id]
        transaction_id = overall_transaction_id(transfer.from_user_id, transfer.to_user_id)
        transactions.append(SettlementTransaction(
            from_=debtor.id,
            to=creditor.id,
            fromName=debtor.name,
            toName=creditor.name,
            amount=round_money(transfer.amount),
            fromBankAccount=debtor.bank_account,
            toBankAccount=creditor.bank_account,
            fromBankName=debtor.bank_name,
            toBankName=creditor.bank_name,
            relatedExpenses=transfer.related_expenses,
            payment_status=resolve_status(transaction_id, stored)
        ))
    
    return SummaryResponse(userSummary=ledger.aggregates(), transactions=transactions)


def _build_expense_transactions(
    expense,
    obligations: List[Obligation],
    users: Dict[int, object],
    statuses: Dict[str, PaymentStatusResponse]
) -> List[ExpenseTransaction]:
    transactions = []
    for obligation in obligations:
        sender = users.get(obligation.from_user_id)
        receiver = users.get(obligation.to_user_id)
        transactions.append(ExpenseTransaction(
            id=obligation.transaction_id,
            fromUserId=obligation.from_user_id,
            toUserId=obligation.to_user_id,
            fromName=sender.name if sender else UNKNOWN_USER,
            toName=receiver.name if receiver else UNKNOWN_USER,
            amount=round_money(obligation.amount),
            fromBankAccount=sender.bank_account if sender else None,
            toBankAccount=receiver.bank_account if receiver else None,
            fromBankName=sender.bank_name if sender else None,
            toBankName=receiver.bank_name if receiver else None,
            relatedExpenses=[expense.name],
            expenseIds=[expense.id],
            payment_status=statuses[obligation.transaction_id]
        ))
    return transactions


def get_expense_summary(store: LedgerStore, expense_id: int) -> ExpenseSummaryResponse:
    """Direct participant -> payer transactions of one expense, not netted."""
    expense = store.get_expense(expense_id)
    participants = store.list_participants(expense_id)
    
    users = {}
    if expense.payer is not None:
        users[expense.payer.id] = expense.payer
    for participant in participants:
        if participant.user is not None:
            users[participant.user.id] = participant.user
    
    obligations = expense_obligations(expense, participants)
    statuses = lookup_statuses(store, [o.transaction_id for o in obligations])
    transactions = _build_expense_transactions(expense, obligations, users, statuses)
    
    return ExpenseSummaryResponse(
        expense=expense_to_response(expense, participants),
        transactions=transactions,
        allCompleted=all_completed(t.payment_status for t in transactions)
    )


def _load_expense_obligations(store: LedgerStore):
    """Newest-first expenses with their participants, obligations and resolved statuses."""
    expenses = store.list_expenses(newest_first=True)
    participants_by_expense = group_participants(store.list_participants())
    obligations_by_expense = {
        expense.id: expense_obligations(expense, participants_by_expense.get(expense.id, []))
        for expense in expenses
    }
    statuses = lookup_statuses(
        store,
        [o.transaction_id for obligations in obligations_by_expense.values() for o in obligations]
    )
    return expenses, participants_by_expense, obligations_by_expense, statuses


def get_expenses_with_status(store: LedgerStore) -> List[ExpenseWithStatus]:
    """Payment progress counters per expense for list views."""
    expenses, participants_by_expense, obligations_by_expense, statuses = _load_expense_obligations(store)
    user_names = {user.id: user.name for user in store.list_users()}
    
    result = []
    for expense in expenses:
        obligations = obligations_by_expense[expense.id]
        payment_count = len(obligations)
        completed_count = sum(1 for o in obligations if statuses[o.transaction_id].paid)
        result.append(ExpenseWithStatus(
            id=expense.id,
            name=expense.name,
            amount=round_money(expense.amount),
            payer_id=expense.payer_id,
            created_at=expense.created_at,
            payer_name=user_names.get(expense.payer_id, UNKNOWN_USER),
            payment_count=payment_count,
            completed_count=completed_count,
            all_payments_completed=payment_count > 0 and completed_count == payment_count,
            participants_count=len(participants_by_expense.get(expense.id, []))
        ))
    return result


def get_expenses_transactions(store: LedgerStore) -> List[ExpenseTransactionsGroup]:
    """Per-expense transactions grouped by expense; expenses with nothing owed are left out."""
    expenses, _, obligations_by_expense, statuses = _load_expense_obligations(store)
    users = {user.id: user for user in store.list_users()}
    
    groups = []
    for expense in expenses:
        obligations = obligations_by_expense[expense.id]
        if not obligations:
            continue
        transactions = _build_expense_transactions(expense, obligations, users, statuses)
        groups.append(ExpenseTransactionsGroup(
            expenseId=expense.id,
            expenseName=expense.name,
            amount=round_money(expense.amount),
            date=expense.created_at,
            transactions=transactions,
            allCompleted=all_completed(t.payment_status for t in transactions)
        ))
    return groups


def get_expense_completion(store: LedgerStore, expense, participants) -> bool:
    """
    Whether every per-expense obligation of the expense is paid.
    An expense with no obligations counts as completed.
    """
    obligations = expense_obligations(expense, participants)
    statuses = lookup_statuses(store, [o.transaction_id for o in obligations])
    return all(status.paid for status in statuses.values())
