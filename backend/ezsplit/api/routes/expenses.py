"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, status
from typing import List
from ezsplit.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseDetailResponse
from ezsplit.services.store import LedgerStore
from ezsplit.services import expense_service
from ezsplit.services.summary_service import get_expense_completion
from ezsplit.api.dependencies import get_store

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(store: LedgerStore = Depends(get_store)):
    """Get all expenses with participants, newest first."""
    return expense_service.list_expenses_with_participants(store)


@router.get("/{expense_id}", response_model=ExpenseDetailResponse)
async def get_expense(expense_id: int, store: LedgerStore = Depends(get_store)):
    """Get an expense with its participants and whether all its payments are done."""
    expense = store.get_expense(expense_id)
    participants = store.list_participants(expense_id)
    response = expense_service.expense_to_response(expense, participants)
    return ExpenseDetailResponse(
        **response.model_dump(),
        allCompleted=get_expense_completion(store, expense, participants)
    )


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(expense_data: ExpenseCreate, store: LedgerStore = Depends(get_store)):
    """Create a new expense with participant shares."""
    return expense_service.create_expense_with_participants(expense_data, store)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(expense_id: int, expense_data: ExpenseUpdate, store: LedgerStore = Depends(get_store)):
    """Update an expense and replace its participants."""
    return expense_service.update_expense(expense_id, expense_data, store)


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int, store: LedgerStore = Depends(get_store)):
    """Delete an expense."""
    expense_service.delete_expense(expense_id, store)
    return {"message": "Expense deleted successfully"}
