# session.py
# Signed session cookie shared by admin logins and Telegram mini-app sessions.
# Token format: "<user_id>:<role>:<issued_at>.<hex hmac-sha256>"

import hashlib
import hmac
import time
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from sqlmodel import Session

from tfc_league.core.config import SESSION_COOKIE_NAME, SESSION_SECRET, SESSION_MAX_AGE, TEST_MODE
from tfc_league.core.database import get_session
from tfc_league.models.user_model import AppUser, ROLE_ADMIN


def _sign(payload: str) -> str:
    return hmac.new(SESSION_SECRET.encode(), payload.encode(), hashlib.sha256).hexdigest()


def create_session_token(user: AppUser, issued_at: Optional[int] = None) -> str:
    issued_at = int(time.time()) if issued_at is None else issued_at
    payload = f"{user.id}:{user.role}:{issued_at}"
    return f"{payload}.{_sign(payload)}"


def read_session_token(token: Optional[str], now: Optional[int] = None) -> Optional[dict]:
    """Returns {"user_id", "role", "issued_at"} for a valid, unexpired token, else None."""
    if not token or "." not in token:
        return None
    payload, signature = token.rsplit(".", 1)
    if not hmac.compare_digest(_sign(payload), signature):
        return None

    parts = payload.split(":")
    if len(parts) != 3:
        return None
    user_id, role, issued_at = parts
    try:
        user_id, issued_at = int(user_id), int(issued_at)
    except ValueError:
        return None

    now = int(time.time()) if now is None else now
    if now - issued_at > SESSION_MAX_AGE:
        return None
    return {"user_id": user_id, "role": role, "issued_at": issued_at}


def set_session_cookie(response: Response, user: AppUser) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=not TEST_MODE,
        path="/",
    )


# ---------------------------------------------
# Dependencies
# ---------------------------------------------
def get_optional_user(request: Request, session: Session = Depends(get_session)) -> Optional[AppUser]:
    data = read_session_token(request.cookies.get(SESSION_COOKIE_NAME))
    if not data:
        return None
    return session.get(AppUser, data["user_id"])


def get_current_user(user: Optional[AppUser] = Depends(get_optional_user)) -> AppUser:
    if user is None:
        raise HTTPException(status_code=401, detail="no_session")
    return user


def require_admin(user: AppUser = Depends(get_current_user)) -> AppUser:
    # Role is re-read from the database, so demoted admins lose access immediately
    if user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
