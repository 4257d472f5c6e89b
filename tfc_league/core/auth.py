from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Response
from sqlmodel import Session, select
from passlib.context import CryptContext

from tfc_league.core.config import SESSION_COOKIE_NAME
from tfc_league.core.database import get_session
from tfc_league.core.session import get_optional_user, set_session_cookie
from tfc_league.models.user_model import AppUser, AdminRegister, AdminLogin, ROLE_ADMIN

router = APIRouter()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# === REGISTER ===

@router.post("/register")
def register_admin(
    data: AdminRegister,
    session: Session = Depends(get_session),
    current_user: Optional[AppUser] = Depends(get_optional_user),
):
    """
    Create an admin account.
    Open while no admin exists (bootstrap); afterwards only admins may add admins.
    """
    admin_exists = session.exec(select(AppUser).where(AppUser.role == ROLE_ADMIN)).first()
    if admin_exists and (current_user is None or current_user.role != ROLE_ADMIN):
        raise HTTPException(status_code=403, detail="Admin access required")

    email = data.email.strip().lower()
    existing = session.exec(select(AppUser).where(AppUser.email == email)).first()
    if existing:
        raise HTTPException(status_code=400, detail="Admin already exists")

    hashed = pwd_context.hash(data.password)
    new_admin = AppUser(email=email, password_hash=hashed, full_name=data.full_name, role=ROLE_ADMIN)
    session.add(new_admin)
    session.commit()

    return {"message": "Admin registered"}


# === LOGIN ===

@router.post("/login")
def login_admin(data: AdminLogin, response: Response, session: Session = Depends(get_session)):
    admin = session.exec(select(AppUser).where(AppUser.email == data.email.strip().lower())).first()
    if not admin or not admin.password_hash:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not pwd_context.verify(data.password, admin.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    set_session_cookie(response, admin)
    return {"message": "Login successful", "role": admin.role}


# === LOGOUT ===

@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"message": "Logged out"}
