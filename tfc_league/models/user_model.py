# user_model.py
# Defines AppUser: Telegram mini-app users and admin accounts share one table

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class AppUser(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Telegram identity (mini-app sessions)
    telegram_id: Optional[int] = Field(default=None, index=True, unique=True)
    telegram_username: Optional[str] = None
    full_name: Optional[str] = None

    # Email/password identity (admin panel)
    email: Optional[str] = Field(default=None, index=True, unique=True)
    password_hash: Optional[str] = None

    role: str = Field(default=ROLE_USER)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class AdminRegister(BaseModel):
    email: str
    password: str
    full_name: Optional[str] = None


class AdminLogin(BaseModel):
    email: str
    password: str
