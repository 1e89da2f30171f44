"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from community_events.models.user import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    role: UserRole = UserRole.participant


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None


class UserOut(BaseModel):
    user_id: str
    email: str
    name: str
    phone: Optional[str] = None
    role: UserRole
    enabled: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RoleChange(BaseModel):
    role: UserRole
