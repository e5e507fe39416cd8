"""
Expense model for tracking shared spending.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, DateTime, func
from sqlalchemy.orm import relationship
from ezsplit.db.base import BaseModel


class Expense(BaseModel):
    """Expense model representing a single payment made on behalf of the group."""
    __tablename__ = "expenses"
    
    name = Column(String(255), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    
    # Relationships
    payer = relationship("User", foreign_keys=[payer_id], back_populates="expenses_paid")
    participants = relationship(
        "Participant",
        back_populates="expense",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Participant.id"
    )


class Participant(BaseModel):
    """Share of an expense owed by one user."""
    __tablename__ = "participants"
    
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)  # Amount owed by user_id toward expense_id
    
    # Relationships
    expense = relationship("Expense", back_populates="participants")
    user = relationship("User", back_populates="participations")
