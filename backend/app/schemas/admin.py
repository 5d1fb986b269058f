"""
Admin Schemas
Pydantic models for administrator accounts.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from app.models.user import AccountStatus
from app.schemas.common import BaseResponse


class AdminRegister(BaseResponse):
    email: str = Field(..., min_length=3, max_length=255)
    password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    admin_key: str
    role: Optional[str] = None


class AdminLogin(BaseResponse):
    email: str
    password: str


class AdminResponse(BaseResponse):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    permissions: List[str]
    status: AccountStatus
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AdminAuthResponse(BaseResponse):
    token: str
    admin: AdminResponse


class AdminLoginResponse(AdminAuthResponse):
    success: bool = True
