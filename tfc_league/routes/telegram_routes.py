# telegram_routes.py
# Admin endpoints that push announcements (free text, standings, matchday summary) to the Telegram chat.

from typing import AsyncIterator, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from tfc_league.core.config import TELEGRAM_TIMEOUT_SECONDS
from tfc_league.core.database import get_session
from tfc_league.core.session import require_admin
from tfc_league.core.standings import compute_standings, compute_top_scorers, group_by_matchday
from tfc_league.models.tournament_model import Tournament, Season
from tfc_league.services.season_data import load_season_matches, load_goal_events
from tfc_league.services.telegram_service import (
    TelegramError,
    TelegramConfigError,
    send_message,
    format_standings_message,
    format_matchday_message,
)

router = APIRouter(dependencies=[Depends(require_admin)])


class TelegramSendRequest(BaseModel):
    text: str
    chat_id: Optional[str] = None
    parse_mode: str = "HTML"
    disable_web_page_preview: bool = True


class TelegramAnnounceRequest(BaseModel):
    chat_id: Optional[str] = None


async def get_telegram_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=TELEGRAM_TIMEOUT_SECONDS) as client:
        yield client


async def _deliver(text: str, client: httpx.AsyncClient, chat_id: Optional[str] = None, **kwargs) -> dict:
    """send_message with its errors mapped onto HTTP answers."""
    try:
        result = await send_message(text, chat_id=chat_id, client=client, **kwargs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TelegramConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except TelegramError as e:
        raise HTTPException(status_code=502, detail={"error": str(e), "details": e.payload})
    return {"ok": True, "result": result}


def _season_title(session: Session, season: Season) -> str:
    tournament = session.get(Tournament, season.tournament_id)
    return f"{tournament.title} · {season.title}" if tournament else season.title


def _get_season_or_404(session: Session, season_id: int) -> Season:
    season = session.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Season not found.")
    return season


@router.post("/send")
async def telegram_send(
    data: TelegramSendRequest,
    client: httpx.AsyncClient = Depends(get_telegram_client),
):
    return await _deliver(
        data.text,
        client,
        chat_id=data.chat_id,
        parse_mode=data.parse_mode,
        disable_web_page_preview=data.disable_web_page_preview,
    )


@router.post("/standings/{season_id}")
async def telegram_standings(
    season_id: int,
    data: Optional[TelegramAnnounceRequest] = None,
    session: Session = Depends(get_session),
    client: httpx.AsyncClient = Depends(get_telegram_client),
):
    season = _get_season_or_404(session, season_id)
    standings = compute_standings(load_season_matches(session, season_id))
    text = format_standings_message(_season_title(session, season), standings)
    return await _deliver(text, client, chat_id=data.chat_id if data else None)


@router.post("/matchday/{season_id}/{matchday}")
async def telegram_matchday(
    season_id: int,
    matchday: int,
    data: Optional[TelegramAnnounceRequest] = None,
    session: Session = Depends(get_session),
    client: httpx.AsyncClient = Depends(get_telegram_client),
):
    season = _get_season_or_404(session, season_id)
    matches = load_season_matches(session, season_id)

    round_matches = dict(group_by_matchday(matches)).get(matchday)
    if not round_matches:
        raise HTTPException(status_code=404, detail=f"No matches for matchday {matchday}.")

    goals = load_goal_events(session, [m.id for m in matches])
    text = format_matchday_message(
        _season_title(session, season),
        matchday,
        round_matches,
        compute_standings(matches),
        compute_top_scorers(goals),
    )
    return await _deliver(text, client, chat_id=data.chat_id if data else None)
