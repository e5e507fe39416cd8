"""
Transaction identity and payment status tracking.

Settlement transactions are recomputed on every request, so their paid
flag is stored separately under a deterministic identifier:

    "{expense_id}-{from_user_id}-{to_user_id}"   per-expense obligation
    "overall-{from_user_id}-{to_user_id}"        netted settlement transfer
"""
import logging
import re
from decimal import Decimal
from typing import Dict, Iterable, List
from ezsplit.core.exceptions import ValidationError
from ezsplit.core.utils import to_decimal
from ezsplit.schemas.summary import PaymentStatusResponse
from ezsplit.services.store import LedgerStore

logger = logging.getLogger(__name__)

OVERALL_PREFIX = "overall"
# Canonical integers only, so "07-2-1" cannot shadow "7-2-1"
TRANSACTION_ID_PATTERN = re.compile(r"^(overall|0|[1-9]\d*)-(0|[1-9]\d*)-(0|[1-9]\d*)$")


def expense_transaction_id(expense_id: int, from_user_id: int, to_user_id: int) -> str:
    return f"{expense_id}-{from_user_id}-{to_user_id}"


def overall_transaction_id(from_user_id: int, to_user_id: int) -> str:
    return f"{OVERALL_PREFIX}-{from_user_id}-{to_user_id}"


def validate_transaction_id(transaction_id: str) -> str:
    """Accept only the two identifier shapes; expense ids must be numeric."""
    transaction_id = str(transaction_id).strip()
    if not TRANSACTION_ID_PATTERN.match(transaction_id):
        raise ValidationError(
            "Invalid transaction id",
            details="Expected '{expense_id}-{from}-{to}' or 'overall-{from}-{to}'"
        )
    return transaction_id


class Obligation:
    """What one non-payer participant owes the payer of one expense."""
    def __init__(self, expense_id: int, from_user_id: int, to_user_id: int, amount: Decimal):
        self.expense_id = expense_id
        self.from_user_id = from_user_id
        self.to_user_id = to_user_id
        self.amount = amount

    @property
    def transaction_id(self) -> str:
        return expense_transaction_id(self.expense_id, self.from_user_id, self.to_user_id)


def expense_obligations(expense, participants: Iterable) -> List[Obligation]:
    """Raw, un-netted obligations of an expense: every participant except the payer."""
    return [
        Obligation(expense.id, participant.user_id, expense.payer_id, to_decimal(participant.amount))
        for participant in participants
        if participant.user_id != expense.payer_id
    ]


def default_status(transaction_id: str) -> PaymentStatusResponse:
    return PaymentStatusResponse(transaction_id=transaction_id, paid=False, paid_at=None)


def resolve_status(transaction_id: str, stored: Dict) -> PaymentStatusResponse:
    """Stored status for the id, or an unpaid default when none was ever saved."""
    status = stored.get(transaction_id)
    if status is None:
        return default_status(transaction_id)
    return PaymentStatusResponse.model_validate(status)


def lookup_statuses(store: LedgerStore, transaction_ids: Iterable[str]) -> Dict[str, PaymentStatusResponse]:
    """Resolve many ids with a single store query."""
    transaction_ids = list(transaction_ids)
    stored = store.get_payment_statuses(transaction_ids)
    return {tid: resolve_status(tid, stored) for tid in transaction_ids}


def get_payment_status(store: LedgerStore, transaction_id: str) -> PaymentStatusResponse:
    transaction_id = validate_transaction_id(transaction_id)
    status = store.get_payment_status(transaction_id)
    if status is None:
        return default_status(transaction_id)
    return PaymentStatusResponse.model_validate(status)


def set_paid(store: LedgerStore, transaction_id: str, paid: bool) -> PaymentStatusResponse:
    """Mark a transaction paid or unpaid. Repeating the same call is harmless."""
    transaction_id = validate_transaction_id(transaction_id)
    if paid is None:
        raise ValidationError("Missing paid status")
    status = store.upsert_payment_status(transaction_id, bool(paid))
    logger.info(f"Payment status of {transaction_id} set to {'paid' if status.paid else 'unpaid'}")
    return PaymentStatusResponse.model_validate(status)


def all_completed(statuses: Iterable[PaymentStatusResponse]) -> bool:
    """True when the group is non-empty and every member is paid."""
    statuses = list(statuses)
    return len(statuses) > 0 and all(status.paid for status in statuses)
