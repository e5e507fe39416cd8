"""
Payment status model keyed by deterministic transaction identifiers.
"""
from sqlalchemy import Column, String, Boolean, DateTime
from ezsplit.db.base import BaseModel, TimestampMixin


class TransactionPaymentStatus(TimestampMixin, BaseModel):
    """
    Persisted paid flag for a derived transaction.
    
    transaction_id is either "{expense_id}-{from}-{to}" for a per-expense
    obligation or "overall-{from}-{to}" for a netted settlement transfer.
    """
    __tablename__ = "transaction_payment_status"
    
    transaction_id = Column(String(255), unique=True, nullable=False, index=True)
    paid = Column(Boolean, default=False, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
