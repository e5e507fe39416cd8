"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from ezsplit.schemas.user import UserRef


class ParticipantShare(BaseModel):
    """One participant share in an expense create/update payload."""
    user_id: Optional[int] = None
    amount: Optional[Decimal] = None


class ExpenseCreate(BaseModel):
    """
    Schema for expense creation and update.
    Fields are optional here and validated in the service so that
    missing fields are reported as a single 400 error.
    """
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    payer_id: Optional[int] = None
    participants: Optional[List[ParticipantShare]] = None


class ExpenseUpdate(ExpenseCreate):
    """Schema for expense update (same required fields as creation)."""
    pass


class ParticipantResponse(BaseModel):
    """Schema for a participant share in responses."""
    expense_id: int
    user_id: Optional[int] = None
    amount: float
    user: Optional[UserRef] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    name: str
    amount: float
    payer_id: Optional[int] = None
    created_at: Optional[datetime] = None
    payer: Optional[UserRef] = None
    participants: List[ParticipantResponse] = []


class ExpenseDetailResponse(ExpenseResponse):
    """Single expense with completion flag of its per-expense payments."""
    allCompleted: bool
