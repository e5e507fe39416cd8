"""
Data-store adapter used by the ledger and summary services.

Wraps a SQLAlchemy session behind the small set of reads and writes the
settlement engine needs. Any SQLAlchemy failure rolls the session back and
is re-raised as StoreError so the whole request aborts.
"""
import logging
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from ezsplit.core.exceptions import NotFoundError, StoreError
from ezsplit.core.utils import now_local
from ezsplit.models.user import User
from ezsplit.models.expense import Expense, Participant
from ezsplit.models.payment_status import TransactionPaymentStatus

logger = logging.getLogger(__name__)


class LedgerStore:
    """Reads users, expenses, participant shares and payment statuses."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def guard(self, operation: str):
        """Run a block of store work; SQLAlchemy errors become StoreError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store operation '{operation}' failed: {e}", exc_info=True)
            raise StoreError(f"Data store failure during {operation}") from e

    def list_users(self) -> List[User]:
        with self.guard("list_users"):
            return self.db.query(User).order_by(User.id).all()

    def get_user(self, user_id: int) -> User:
        with self.guard("get_user"):
            user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_expenses(self, newest_first: bool = False) -> List[Expense]:
        """All expenses, by id or newest first (created_at desc, then id desc)."""
        with self.guard("list_expenses"):
            query = self.db.query(Expense).options(joinedload(Expense.payer))
            if newest_first:
                query = query.order_by(Expense.created_at.desc(), Expense.id.desc())
            else:
                query = query.order_by(Expense.id)
            return query.all()

    def get_expense(self, expense_id: int) -> Expense:
        with self.guard("get_expense"):
            expense = self.db.query(Expense).options(
                joinedload(Expense.payer)
            ).filter(Expense.id == expense_id).first()
        if not expense:
            raise NotFoundError("Expense not found")
        return expense

    def list_participants(self, expense_id: Optional[int] = None) -> List[Participant]:
        """Participant shares in insertion order, optionally for one expense."""
        with self.guard("list_participants"):
            query = self.db.query(Participant).options(joinedload(Participant.user))
            if expense_id is not None:
                query = query.filter(Participant.expense_id == expense_id)
            return query.order_by(Participant.id).all()

    def get_payment_status(self, transaction_id: str) -> Optional[TransactionPaymentStatus]:
        with self.guard("get_payment_status"):
            return self._find_payment_status(transaction_id)

    def get_payment_statuses(self, transaction_ids: Optional[Iterable[str]] = None) -> Dict[str, TransactionPaymentStatus]:
        """Stored statuses keyed by transaction id; all of them when no ids are given."""
        with self.guard("get_payment_statuses"):
            query = self.db.query(TransactionPaymentStatus)
            if transaction_ids is not None:
                ids = list(transaction_ids)
                if not ids:
                    return {}
                query = query.filter(TransactionPaymentStatus.transaction_id.in_(ids))
            return {status.transaction_id: status for status in query.all()}

    def upsert_payment_status(self, transaction_id: str, paid: bool) -> TransactionPaymentStatus:
        """
        Insert or update the paid flag of a transaction.
        
        paid_at is stamped with the current local time when paid, cleared
        otherwise. Concurrent writers for the same id are last-write-wins: an
        insert that loses the race on the unique id is retried as an update.
        """
        with self.guard("upsert_payment_status"):
            try:
                status = self._write_payment_status(transaction_id, paid)
            except IntegrityError:
                self.db.rollback()
                logger.info(f"Payment status {transaction_id} was inserted concurrently; updating it instead")
                status = self._write_payment_status(transaction_id, paid)
            self.db.refresh(status)
            return status

    def _find_payment_status(self, transaction_id: str) -> Optional[TransactionPaymentStatus]:
        return self.db.query(TransactionPaymentStatus).filter(
            TransactionPaymentStatus.transaction_id == transaction_id
        ).first()

    def _write_payment_status(self, transaction_id: str, paid: bool) -> TransactionPaymentStatus:
        now = now_local()
        status = self._find_payment_status(transaction_id)
        if status is None:
            status = TransactionPaymentStatus(transaction_id=transaction_id, created_at=now)
            self.db.add(status)
        status.paid = paid
        status.paid_at = now if paid else None
        status.updated_at = now
        self.db.commit()
        return status
