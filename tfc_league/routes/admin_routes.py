# admin_routes.py
# Admin CRUD: tournaments, seasons, teams, players, matches, events, lineups and fixture generation.
# Every endpoint here requires an admin session.

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from tfc_league.core.database import get_session
from tfc_league.core.session import require_admin
from tfc_league.core.standings import MatchStatus
from tfc_league.models.tournament_model import (
    Tournament, Season, SeasonTeam, TournamentCreate, TournamentStatusUpdate, SeasonCreate
)
from tfc_league.models.team_model import Team, Player, TeamCreate, PlayerCreate
from tfc_league.models.match_model import (
    Match, MatchEvent, MatchLineup, MatchCreate, MatchResultUpdate, MatchEventCreate, LineupUpsert
)
from tfc_league.services.generate_fixtures import generate_fixtures_for_season

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])

TOURNAMENT_STATUSES = {"draft", "active", "archived"}


def _get_or_404(session: Session, model, obj_id: int, label: str):
    obj = session.get(model, obj_id)
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found.")
    return obj


def _require_text(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail=f"{label} is required.")
    return value


# =========================================
# TOURNAMENTS
# =========================================
@router.get("/tournaments")
def admin_list_tournaments(session: Session = Depends(get_session)):
    return session.exec(select(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc())).all()


@router.post("/tournaments")
def create_tournament(data: TournamentCreate, session: Session = Depends(get_session)):
    if data.status not in TOURNAMENT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status: {data.status}")
    tournament = Tournament(
        title=_require_text(data.title, "Tournament title"),
        format=data.format,
        status=data.status,
        logo_url=data.logo_url,
    )
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    logger.info("Tournament created: %s (id=%s)", tournament.title, tournament.id)
    return tournament


@router.patch("/tournaments/{tournament_id}")
def update_tournament_status(tournament_id: int, data: TournamentStatusUpdate, session: Session = Depends(get_session)):
    tournament = _get_or_404(session, Tournament, tournament_id, "Tournament")
    if data.status not in TOURNAMENT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status: {data.status}")
    tournament.status = data.status
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


# =========================================
# SEASONS
# =========================================
@router.get("/tournaments/{tournament_id}/seasons")
def admin_list_seasons(tournament_id: int, session: Session = Depends(get_session)):
    _get_or_404(session, Tournament, tournament_id, "Tournament")
    return session.exec(
        select(Season)
        .where(Season.tournament_id == tournament_id)
        .order_by(Season.created_at.desc(), Season.id.desc())
    ).all()


@router.post("/tournaments/{tournament_id}/seasons")
def create_season(tournament_id: int, data: SeasonCreate, session: Session = Depends(get_session)):
    _get_or_404(session, Tournament, tournament_id, "Tournament")
    if data.start_date and data.end_date and data.end_date < data.start_date:
        raise HTTPException(status_code=400, detail="Season end_date is before start_date.")
    season = Season(
        tournament_id=tournament_id,
        title=_require_text(data.title, "Season title"),
        start_date=data.start_date,
        end_date=data.end_date,
    )
    session.add(season)
    session.commit()
    session.refresh(season)
    return season


@router.post("/seasons/{season_id}/teams/{team_id}")
def register_team_in_season(season_id: int, team_id: int, session: Session = Depends(get_session)):
    _get_or_404(session, Season, season_id, "Season")
    _get_or_404(session, Team, team_id, "Team")
    existing = session.exec(
        select(SeasonTeam).where(SeasonTeam.season_id == season_id, SeasonTeam.team_id == team_id)
    ).first()
    if existing:
        return existing
    link = SeasonTeam(season_id=season_id, team_id=team_id)
    session.add(link)
    session.commit()
    session.refresh(link)
    return link


@router.post("/seasons/{season_id}/fixtures")
def generate_season_fixtures(
    season_id: int,
    start: Optional[date] = None,
    double: bool = True,
    session: Session = Depends(get_session),
):
    """Double round-robin for the registered teams (single round-robin with double=false)."""
    _get_or_404(session, Season, season_id, "Season")
    try:
        created = generate_fixtures_for_season(session, season_id, start=start, double=double)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"season_id": season_id, "matches_created": len(created), "matches": created}


# =========================================
# TEAMS AND PLAYERS
# =========================================
@router.get("/teams")
def admin_list_teams(session: Session = Depends(get_session)):
    return session.exec(select(Team).order_by(Team.name)).all()


@router.post("/teams")
def create_team(data: TeamCreate, session: Session = Depends(get_session)):
    team = Team(name=_require_text(data.name, "Team name"), logo_url=data.logo_url)
    session.add(team)
    session.commit()
    session.refresh(team)
    return team


@router.post("/teams/{team_id}/players")
def create_player(team_id: int, data: PlayerCreate, session: Session = Depends(get_session)):
    _get_or_404(session, Team, team_id, "Team")
    player = Player(
        team_id=team_id,
        full_name=_require_text(data.full_name, "Player name"),
        position=data.position,
        number=data.number,
        is_goalkeeper=data.is_goalkeeper,
    )
    session.add(player)
    session.commit()
    session.refresh(player)
    return player


# =========================================
# MATCHES
# =========================================
@router.post("/seasons/{season_id}/matches")
def create_match(season_id: int, data: MatchCreate, session: Session = Depends(get_session)):
    _get_or_404(session, Season, season_id, "Season")
    if data.home_team_id == data.away_team_id:
        raise HTTPException(status_code=400, detail="Home and away team must be different.")
    _get_or_404(session, Team, data.home_team_id, "Home team")
    _get_or_404(session, Team, data.away_team_id, "Away team")

    match = Match(
        season_id=season_id,
        home_team_id=data.home_team_id,
        away_team_id=data.away_team_id,
        matchday=data.matchday,
        kickoff_at=data.kickoff_at,
        venue=data.venue,
    )
    session.add(match)
    session.commit()
    session.refresh(match)
    return match


@router.patch("/matches/{match_id}")
def update_match_result(match_id: int, data: MatchResultUpdate, session: Session = Depends(get_session)):
    """Set status and score. A SCHEDULED match always carries 0:0."""
    match = _get_or_404(session, Match, match_id, "Match")

    match.status = data.status.value
    if data.status == MatchStatus.SCHEDULED:
        match.home_score, match.away_score = 0, 0
    else:
        match.home_score, match.away_score = data.home_score, data.away_score
    match.updated_at = datetime.utcnow()

    session.add(match)
    session.commit()
    session.refresh(match)
    logger.info("Match %s set to %s %s:%s", match.id, match.status, match.home_score, match.away_score)
    return match


@router.delete("/matches/{match_id}")
def delete_match(match_id: int, session: Session = Depends(get_session)):
    match = _get_or_404(session, Match, match_id, "Match")
    for event in session.exec(select(MatchEvent).where(MatchEvent.match_id == match_id)).all():
        session.delete(event)
    for lineup in session.exec(select(MatchLineup).where(MatchLineup.match_id == match_id)).all():
        session.delete(lineup)
    session.delete(match)
    session.commit()
    return {"message": "Match deleted", "match_id": match_id}


# =========================================
# EVENTS
# =========================================
def _check_side(match: Match, team_id: Optional[int]) -> None:
    if team_id is not None and team_id not in (match.home_team_id, match.away_team_id):
        raise HTTPException(status_code=400, detail="Team did not play in this match.")


@router.post("/matches/{match_id}/events")
def add_match_event(match_id: int, data: MatchEventCreate, session: Session = Depends(get_session)):
    match = _get_or_404(session, Match, match_id, "Match")
    _check_side(match, data.team_id)
    for player_id in (data.player_id, data.assist_player_id):
        if player_id is not None:
            _get_or_404(session, Player, player_id, "Player")
    if data.player_id is not None and data.player_id == data.assist_player_id:
        raise HTTPException(status_code=400, detail="Scorer cannot assist their own goal.")

    event = MatchEvent(
        match_id=match_id,
        type=data.type.value,
        team_id=data.team_id,
        player_id=data.player_id,
        assist_player_id=data.assist_player_id,
        minute=data.minute,
        extra_minute=data.extra_minute,
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@router.delete("/events/{event_id}")
def delete_match_event(event_id: int, session: Session = Depends(get_session)):
    event = _get_or_404(session, MatchEvent, event_id, "Event")
    session.delete(event)
    session.commit()
    return {"message": "Event deleted", "event_id": event_id}


# =========================================
# LINEUPS
# =========================================
@router.put("/matches/{match_id}/lineups")
def upsert_lineup(match_id: int, data: LineupUpsert, session: Session = Depends(get_session)):
    """One lineup row per (match, team); calling again replaces the goalkeeper."""
    match = _get_or_404(session, Match, match_id, "Match")
    _check_side(match, data.team_id)
    if data.goalkeeper_player_id is not None:
        _get_or_404(session, Player, data.goalkeeper_player_id, "Goalkeeper")

    lineup = session.exec(
        select(MatchLineup).where(MatchLineup.match_id == match_id, MatchLineup.team_id == data.team_id)
    ).first()
    if not lineup:
        lineup = MatchLineup(match_id=match_id, team_id=data.team_id)
    lineup.goalkeeper_player_id = data.goalkeeper_player_id

    session.add(lineup)
    session.commit()
    session.refresh(lineup)
    return lineup
