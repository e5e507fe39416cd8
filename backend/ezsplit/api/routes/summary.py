"""
Summary, settlement and payment status routes.
"""
from fastapi import APIRouter, Depends
from typing import List
from ezsplit.schemas.summary import (
    SummaryResponse, ExpenseSummaryResponse, ExpenseWithStatus, ExpenseTransactionsGroup,
    PaymentStatusResponse, PaymentStatusUpdate
)
from ezsplit.services.store import LedgerStore
from ezsplit.services import summary_service, payment_status_service
from ezsplit.api.dependencies import get_store

router = APIRouter(prefix="/summary", tags=["summary"])


@router.get("", response_model=SummaryResponse)
async def get_summary(store: LedgerStore = Depends(get_store)):
    """Balances of every user and the minimal set of transfers that settles them."""
    return summary_service.get_summary(store)


@router.get("/expenses-with-status", response_model=List[ExpenseWithStatus])
async def get_expenses_with_status(store: LedgerStore = Depends(get_store)):
    """Payment progress of every expense."""
    return summary_service.get_expenses_with_status(store)


@router.get("/expenses-transactions", response_model=List[ExpenseTransactionsGroup])
async def get_expenses_transactions(store: LedgerStore = Depends(get_store)):
    """Per-expense transactions grouped by expense."""
    return summary_service.get_expenses_transactions(store)


@router.get("/expense/{expense_id}", response_model=ExpenseSummaryResponse)
async def get_expense_summary(expense_id: int, store: LedgerStore = Depends(get_store)):
    """Direct payments owed to the payer of one expense."""
    return summary_service.get_expense_summary(store, expense_id)


@router.get("/payment/{transaction_id}", response_model=PaymentStatusResponse)
async def get_payment_status(transaction_id: str, store: LedgerStore = Depends(get_store)):
    """Payment status of a transaction; unpaid if never recorded."""
    return payment_status_service.get_payment_status(store, transaction_id)


@router.post("/payment/{transaction_id}", response_model=PaymentStatusResponse)
async def update_payment_status(
    transaction_id: str,
    status_data: PaymentStatusUpdate,
    store: LedgerStore = Depends(get_store)
):
    """Mark a transaction paid or unpaid."""
    return payment_status_service.set_paid(store, transaction_id, status_data.paid)
