"""
Pydantic schemas for ledger summaries, settlement transactions and payment status.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from ezsplit.schemas.expense import ExpenseResponse


class PaymentStatusResponse(BaseModel):
    """Persisted (or default) payment status of a transaction."""
    transaction_id: str
    paid: bool = False
    paid_at: Optional[datetime] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class PaymentStatusUpdate(BaseModel):
    """Body of a payment status update."""
    paid: Optional[bool] = None


class UserAggregate(BaseModel):
    """Per-user ledger totals, rounded to 2 decimals."""
    id: int
    name: str
    paid: float = 0
    spent: float = 0
    balance: float = 0
    received: float = 0
    pending: float = 0
    bank_account: Optional[str] = None
    bank_name: Optional[str] = None


class SettlementTransaction(BaseModel):
    """Netted transfer suggested by the settlement planner."""
    model_config = ConfigDict(populate_by_name=True)
    
    from_: int = Field(alias="from")
    to: int
    fromName: str
    toName: str
    amount: float
    fromBankAccount: Optional[str] = None
    toBankAccount: Optional[str] = None
    fromBankName: Optional[str] = None
    toBankName: Optional[str] = None
    relatedExpenses: List[str] = []
    payment_status: PaymentStatusResponse


class SummaryResponse(BaseModel):
    """Global summary: every user's aggregate and the netted settlement."""
    userSummary: List[UserAggregate]
    transactions: List[SettlementTransaction]


class ExpenseTransaction(BaseModel):
    """Raw, un-netted obligation of one participant toward the payer of one expense."""
    id: str
    fromUserId: Optional[int] = None
    toUserId: Optional[int] = None
    fromName: str
    toName: str
    amount: float
    fromBankAccount: Optional[str] = None
    toBankAccount: Optional[str] = None
    fromBankName: Optional[str] = None
    toBankName: Optional[str] = None
    relatedExpenses: List[str] = []
    expenseIds: List[int] = []
    payment_status: PaymentStatusResponse


class ExpenseSummaryResponse(BaseModel):
    """Per-expense summary."""
    expense: ExpenseResponse
    transactions: List[ExpenseTransaction]
    allCompleted: bool


class ExpenseWithStatus(BaseModel):
    """List-view row of an expense with payment progress counters."""
    id: int
    name: str
    amount: float
    payer_id: Optional[int] = None
    created_at: Optional[datetime] = None
    payer_name: str
    payment_count: int
    completed_count: int
    all_payments_completed: bool
    participants_count: int


class ExpenseTransactionsGroup(BaseModel):
    """Per-expense transactions grouped under their expense."""
    expenseId: int
    expenseName: str
    amount: float
    date: Optional[datetime] = None
    transactions: List[ExpenseTransaction]
    allCompleted: bool
