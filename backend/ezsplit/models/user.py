"""
User model for group members.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from ezsplit.db.base import BaseModel


class User(BaseModel):
    """Group member. Immutable once referenced by expenses."""
    __tablename__ = "users"
    
    name = Column(String(255), nullable=False)
    bank_account = Column(String(255), nullable=True)
    bank_name = Column(String(50), nullable=True)  # Defaults to DEFAULT_BANK_NAME on creation when omitted
    
    # Relationships
    expenses_paid = relationship("Expense", foreign_keys="Expense.payer_id", back_populates="payer")
    participations = relationship("Participant", back_populates="user")
