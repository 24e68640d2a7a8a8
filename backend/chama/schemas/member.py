"""
Pydantic schemas for Member endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, EmailStr


class MemberCreate(BaseModel):
    """Create a new member."""
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    is_active: bool = True


class MemberUpdate(BaseModel):
    """Update a member. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


class MemberSummary(BaseModel):
    """Member fields embedded in contribution responses."""
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    """Member response."""
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    join_date: datetime
    is_active: bool = True
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True
