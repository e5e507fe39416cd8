"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel
from typing import Optional


class UserBase(BaseModel):
    """Base user schema."""
    name: Optional[str] = None
    bank_account: Optional[str] = None
    bank_name: Optional[str] = None


class UserCreate(UserBase):
    """Schema for user creation. name is checked by the route so a missing name maps to 400."""
    pass


class UserUpdate(UserBase):
    """Schema for user update."""
    pass


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    name: str
    bank_account: Optional[str] = None
    bank_name: Optional[str] = None
    
    class Config:
        from_attributes = True


class UserRef(BaseModel):
    """Minimal user reference embedded in expense responses."""
    id: int
    name: str
    
    class Config:
        from_attributes = True
