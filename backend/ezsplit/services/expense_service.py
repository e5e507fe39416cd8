"""
Expense service for expense-related business logic.
"""
import logging
from typing import Dict, Iterable, List
from ezsplit.core.exceptions import ValidationError
from ezsplit.core.utils import round_money
from ezsplit.models.user import User
from ezsplit.models.expense import Expense, Participant
from ezsplit.schemas.expense import ExpenseCreate, ExpenseResponse, ParticipantResponse
from ezsplit.schemas.user import UserRef
from ezsplit.services.store import LedgerStore

logger = logging.getLogger(__name__)


def group_participants(participants: Iterable) -> Dict[int, List]:
    """Group participant shares by expense id, keeping their order."""
    grouped: Dict[int, List] = {}
    for participant in participants:
        grouped.setdefault(participant.expense_id, []).append(participant)
    return grouped


def expense_to_response(expense: Expense, participants: Iterable[Participant]) -> ExpenseResponse:
    """Build expense response with payer and participant users embedded."""
    return ExpenseResponse(
        id=expense.id,
        name=expense.name,
        amount=round_money(expense.amount),
        payer_id=expense.payer_id,
        created_at=expense.created_at,
        payer=UserRef.model_validate(expense.payer) if expense.payer else None,
        participants=[
            ParticipantResponse(
                expense_id=p.expense_id,
                user_id=p.user_id,
                amount=round_money(p.amount),
                user=UserRef.model_validate(p.user) if p.user else None
            )
            for p in participants
        ]
    )


def validate_expense_payload(data: ExpenseCreate, store: LedgerStore) -> None:
    """Check required fields and referenced users before anything is written."""
    if (
        not data.name or not data.name.strip()
        or data.amount is None
        or data.payer_id is None
        or not data.participants
    ):
        raise ValidationError(
            "Invalid request. Required fields: name, amount, payer_id, participants (array)"
        )
    if data.amount <= 0:
        raise ValidationError("Expense amount must be positive")
    for share in data.participants:
        if share.user_id is None or share.amount is None:
            raise ValidationError("Each participant requires user_id and amount")
        if share.amount < 0:
            raise ValidationError("Participant amount must not be negative")
    
    user_ids = {data.payer_id} | {share.user_id for share in data.participants}
    with store.guard("validate_expense_users"):
        known = {uid for (uid,) in store.db.query(User.id).filter(User.id.in_(user_ids)).all()}
    missing = sorted(user_ids - known)
    if missing:
        raise ValidationError("Unknown user ids", details=missing)


def _add_participants(store: LedgerStore, expense: Expense, data: ExpenseCreate) -> None:
    for share in data.participants:
        store.db.add(Participant(
            expense_id=expense.id,
            user_id=share.user_id,
            amount=share.amount
        ))


def list_expenses_with_participants(store: LedgerStore) -> List[ExpenseResponse]:
    """All expenses newest first, each with its participants."""
    expenses = store.list_expenses(newest_first=True)
    if not expenses:
        return []
    participants_by_expense = group_participants(store.list_participants())
    return [expense_to_response(e, participants_by_expense.get(e.id, [])) for e in expenses]


def create_expense_with_participants(data: ExpenseCreate, store: LedgerStore) -> ExpenseResponse:
    """Create an expense and its participant shares in one database transaction."""
    validate_expense_payload(data, store)
    
    with store.guard("create_expense"):
        expense = Expense(name=data.name.strip(), amount=data.amount, payer_id=data.payer_id)
        store.db.add(expense)
        store.db.flush()
        _add_participants(store, expense, data)
        store.db.commit()
        expense_id = expense.id
    
    logger.info(f"Created expense {expense_id} with {len(data.participants)} participants")
    return expense_to_response(store.get_expense(expense_id), store.list_participants(expense_id))


def update_expense(expense_id: int, data: ExpenseCreate, store: LedgerStore) -> ExpenseResponse:
    """Update an expense and replace its participant list."""
    expense = store.get_expense(expense_id)
    validate_expense_payload(data, store)
    
    with store.guard("update_expense"):
        expense.name = data.name.strip()
        expense.amount = data.amount
        expense.payer_id = data.payer_id
        store.db.query(Participant).filter(
            Participant.expense_id == expense_id
        ).delete(synchronize_session=False)
        _add_participants(store, expense, data)
        store.db.commit()
    
    store.db.expire_all()
    logger.info(f"Updated expense {expense_id}")
    return expense_to_response(store.get_expense(expense_id), store.list_participants(expense_id))


def delete_expense(expense_id: int, store: LedgerStore) -> None:
    """Delete an expense; its participant shares go with it."""
    expense = store.get_expense(expense_id)
    with store.guard("delete_expense"):
        store.db.query(Participant).filter(
            Participant.expense_id == expense_id
        ).delete(synchronize_session=False)
        store.db.delete(expense)
        store.db.commit()
    logger.info(f"Deleted expense {expense_id}")
