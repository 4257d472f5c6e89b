# tournament_routes.py
# Public read endpoints: tournaments, their latest season, standings and season stats.

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from tfc_league.core.config import LEADERBOARD_LIMIT
from tfc_league.core.database import get_session
from tfc_league.core.standings import (
    compute_standings,
    compute_top_scorers,
    compute_top_assists,
    compute_clean_sheets,
    is_finished,
)
from tfc_league.models.tournament_model import Tournament, Season
from tfc_league.services.season_data import (
    get_latest_season,
    load_season_matches,
    load_goal_events,
    load_lineups,
)

router = APIRouter()


def get_tournament_or_404(session: Session, tournament_id: int) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found.")
    return tournament


def serialize_match(m) -> dict:
    return {
        "id": m.id,
        "matchday": m.matchday,
        "kickoff_at": m.kickoff_at,
        "status": m.status,
        "home_team_id": m.home_team_id,
        "home_team_name": m.home_team_name,
        "away_team_id": m.away_team_id,
        "away_team_name": m.away_team_name,
        "home_score": m.home_score,
        "away_score": m.away_score,
    }


# =========================================
# LIST TOURNAMENTS
# =========================================
@router.get("")
def list_tournaments(session: Session = Depends(get_session)):
    """All tournaments, newest first."""
    return session.exec(
        select(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc())
    ).all()


# =========================================
# TOURNAMENT OVERVIEW
# =========================================
@router.get("/{tournament_id}")
def get_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """
    Tournament with its latest season, the season's matches and the standings table.
    A tournament without seasons answers with season=None and empty lists.
    """
    tournament = get_tournament_or_404(session, tournament_id)
    season = get_latest_season(session, tournament_id)
    if not season:
        return {"tournament": tournament, "season": None, "matches": [], "standings": []}

    matches = load_season_matches(session, season.id)
    return {
        "tournament": tournament,
        "season": season,
        "matches": [serialize_match(m) for m in matches],
        "standings": compute_standings(matches),
    }


# =========================================
# STANDINGS (latest season)
# =========================================
@router.get("/{tournament_id}/standings")
def get_tournament_standings(tournament_id: int, session: Session = Depends(get_session)):
    get_tournament_or_404(session, tournament_id)
    season = get_latest_season(session, tournament_id)
    if not season:
        return {"season": None, "standings": []}

    return {"season": season, "standings": compute_standings(load_season_matches(session, season.id))}


# =========================================
# SEASON STATS (latest season)
# =========================================
def build_season_stats(session: Session, season: Season) -> dict:
    matches = load_season_matches(session, season.id)
    match_ids = [m.id for m in matches]
    goals = load_goal_events(session, match_ids)
    lineups = load_lineups(session, match_ids)

    standings = compute_standings(matches)
    # Form table ordered by points only; sorted() keeps table order for equal points
    team_form = sorted(
        ({"team_id": r.team_id, "team_name": r.team_name, "points": r.points, "form": r.form} for r in standings),
        key=lambda row: -row["points"],
    )

    return {
        "season": season,
        "matches_total": len(matches),
        "matches_finished": sum(1 for m in matches if is_finished(m)),
        "top_scorers": compute_top_scorers(goals, LEADERBOARD_LIMIT),
        "top_assists": compute_top_assists(goals, LEADERBOARD_LIMIT),
        "clean_sheets": compute_clean_sheets(matches, lineups, LEADERBOARD_LIMIT),
        "team_form": team_form,
    }


@router.get("/{tournament_id}/stats")
def get_tournament_stats(tournament_id: int, session: Session = Depends(get_session)):
    tournament = get_tournament_or_404(session, tournament_id)
    season = get_latest_season(session, tournament_id)
    if not season:
        return {
            "tournament": tournament,
            "season": None,
            "matches_total": 0,
            "matches_finished": 0,
            "top_scorers": [],
            "top_assists": [],
            "clean_sheets": [],
            "team_form": [],
        }

    return {"tournament": tournament, **build_season_stats(session, season)}
