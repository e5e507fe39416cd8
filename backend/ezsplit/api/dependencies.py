"""
Shared route dependencies.
"""
from fastapi import Depends
from sqlalchemy.orm import Session
from ezsplit.db.session import get_db
from ezsplit.services.store import LedgerStore


def get_store(db: Session = Depends(get_db)) -> LedgerStore:
    """Request-scoped data store over the request's database session."""
    return LedgerStore(db)
