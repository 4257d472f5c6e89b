# team_routes.py
# Public team pages: team info, seasons played, roster, and per-season record.

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from tfc_league.core.database import get_session
from tfc_league.core.standings import compute_standings, compute_form, result_letter, is_finished
from tfc_league.models.tournament_model import Tournament, Season, SeasonTeam
from tfc_league.models.team_model import Team, Player
from tfc_league.routes.tournament_routes import serialize_match
from tfc_league.services.season_data import load_season_matches

router = APIRouter()


def get_team_or_404(session: Session, team_id: int) -> Team:
    team = session.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found.")
    return team


# =========================================
# TEAM OVERVIEW
# =========================================
@router.get("/{team_id}")
def get_team(team_id: int, session: Session = Depends(get_session)):
    """Team, the seasons it is registered in (newest first) and its roster by shirt number."""
    team = get_team_or_404(session, team_id)

    seasons = session.exec(
        select(Season)
        .join(SeasonTeam, SeasonTeam.season_id == Season.id)
        .where(SeasonTeam.team_id == team_id)
        .order_by(Season.created_at.desc(), Season.id.desc())
    ).all()

    players = session.exec(
        select(Player)
        .where(Player.team_id == team_id)
        .order_by(Player.number.is_(None), Player.number, Player.full_name)
    ).all()

    return {"team": team, "seasons": seasons, "players": players}


# =========================================
# TEAM IN ONE SEASON
# =========================================
@router.get("/{team_id}/seasons/{season_id}")
def get_team_season(team_id: int, season_id: int, session: Session = Depends(get_session)):
    """
    The team's matches in a season with a result letter each ("-" until FINISHED),
    its row of the season table and its last-5 form.
    """
    team = get_team_or_404(session, team_id)
    season = session.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Season not found.")
    tournament = session.get(Tournament, season.tournament_id)

    season_matches = load_season_matches(session, season_id)
    team_matches = [m for m in season_matches if team_id in (m.home_team_id, m.away_team_id)]

    matches_payload = []
    for m in team_matches:
        item = serialize_match(m)
        item["result"] = result_letter(m.home_score, m.away_score, m.home_team_id == team_id) if is_finished(m) else "-"
        matches_payload.append(item)

    standing = next((row for row in compute_standings(season_matches) if row.team_id == team_id), None)

    return {
        "team": team,
        "season": season,
        "tournament": tournament,
        "matches": matches_payload,
        "standing": standing,
        "form": compute_form(season_matches, team_id),
    }
