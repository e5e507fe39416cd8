"""
User management routes.
"""
import logging
from fastapi import APIRouter, Depends, status
from typing import List
from ezsplit.core.config import settings
from ezsplit.core.exceptions import ValidationError
from ezsplit.models.user import User
from ezsplit.models.expense import Expense, Participant
from ezsplit.schemas.user import UserCreate, UserUpdate, UserResponse
from ezsplit.services.store import LedgerStore
from ezsplit.api.dependencies import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _require_name(user_data: UserCreate) -> str:
    name = (user_data.name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


@router.get("", response_model=List[UserResponse])
async def list_users(store: LedgerStore = Depends(get_store)):
    """Get all users ordered by id."""
    return store.list_users()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, store: LedgerStore = Depends(get_store)):
    """Get user by ID."""
    return store.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, store: LedgerStore = Depends(get_store)):
    """Create a new user. bank_name defaults when not sent."""
    name = _require_name(user_data)
    bank_name = user_data.bank_name
    if "bank_name" not in user_data.model_fields_set:
        bank_name = settings.DEFAULT_BANK_NAME
    
    with store.guard("create_user"):
        user = User(name=name, bank_account=user_data.bank_account, bank_name=bank_name)
        store.db.add(user)
        store.db.commit()
        store.db.refresh(user)
    
    logger.info(f"Created user {user.id}")
    return user


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, user_data: UserUpdate, store: LedgerStore = Depends(get_store)):
    """Update a user's name and bank details."""
    name = _require_name(user_data)
    user = store.get_user(user_id)
    
    with store.guard("update_user"):
        user.name = name
        # Bank fields left out of the request keep their stored values
        if "bank_account" in user_data.model_fields_set:
            user.bank_account = user_data.bank_account
        if "bank_name" in user_data.model_fields_set:
            user.bank_name = user_data.bank_name
        store.db.commit()
        store.db.refresh(user)
    
    return user


@router.delete("/{user_id}")
async def delete_user(user_id: int, store: LedgerStore = Depends(get_store)):
    """Delete a user that no expense references."""
    user = store.get_user(user_id)
    
    with store.guard("delete_user"):
        is_payer = store.db.query(Expense.id).filter(Expense.payer_id == user_id).first() is not None
        is_participant = store.db.query(Participant.id).filter(Participant.user_id == user_id).first() is not None
    
    if is_payer:
        raise ValidationError("Cannot delete user: User is referenced as payer in one or more expenses")
    if is_participant:
        raise ValidationError("Cannot delete user: User is referenced as participant in one or more expenses")
    
    with store.guard("delete_user"):
        store.db.delete(user)
        store.db.commit()
    
    logger.info(f"Deleted user {user_id}")
    return {"message": "User deleted successfully"}
