"""Models package - Import all models for SQLAlchemy registration."""
from ezsplit.models.user import User
from ezsplit.models.expense import Expense, Participant
from ezsplit.models.payment_status import TransactionPaymentStatus

__all__ = [
    "User",
    "Expense",
    "Participant",
    "TransactionPaymentStatus",
]
