# tma_routes.py
# Telegram mini-app API: session bootstrap from initData and session-guarded reads.

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlmodel import Session, select

from tfc_league.core.config import TELEGRAM_BOT_TOKEN
from tfc_league.core.database import get_session
from tfc_league.core.session import get_current_user, set_session_cookie
from tfc_league.core.tg_init_data import InitDataError, verify_init_data
from tfc_league.models.tournament_model import Tournament
from tfc_league.models.user_model import AppUser, ROLE_USER

logger = logging.getLogger(__name__)

router = APIRouter()


class TmaSessionRequest(BaseModel):
    initData: str = ""


def get_bot_token() -> str:
    return TELEGRAM_BOT_TOKEN


# =========================================
# SESSION BOOTSTRAP
# =========================================
@router.post("/session")
def create_tma_session(
    data: TmaSessionRequest,
    response: Response,
    session: Session = Depends(get_session),
    bot_token: str = Depends(get_bot_token),
):
    """
    Verifies Telegram initData, upserts the AppUser by telegram_id and sets the session cookie.
    Existing users keep their role; new users start as "user".
    """
    try:
        verified = verify_init_data(data.initData, bot_token)
    except InitDataError as e:
        logger.info("TMA session rejected: %s", e)
        raise HTTPException(status_code=401, detail=str(e))

    tg_user = verified["user"]
    telegram_id = int(tg_user["id"])
    full_name = f"{tg_user.get('first_name') or ''} {tg_user.get('last_name') or ''}".strip() or None

    user = session.exec(select(AppUser).where(AppUser.telegram_id == telegram_id)).first()
    if not user:
        user = AppUser(telegram_id=telegram_id, role=ROLE_USER)
    user.telegram_username = tg_user.get("username")
    user.full_name = full_name

    session.add(user)
    session.commit()
    session.refresh(user)

    set_session_cookie(response, user)
    return {"ok": True, "app_user_id": user.id, "role": user.role}


# =========================================
# SESSION-GUARDED READS
# =========================================
@router.get("/me")
def tma_me(user: AppUser = Depends(get_current_user)):
    return {
        "ok": True,
        "user": {
            "id": user.id,
            "telegram_id": user.telegram_id,
            "telegram_username": user.telegram_username,
            "full_name": user.full_name,
            "role": user.role,
        },
    }


@router.get("/tournaments")
def tma_tournaments(user: AppUser = Depends(get_current_user), session: Session = Depends(get_session)):
    tournaments = session.exec(
        select(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc())
    ).all()
    return {"ok": True, "tournaments": tournaments}
